import os
from pathlib import Path

DATA_DIR = Path(os.environ.get("CLIPSHELF_DATA_DIR", Path.home() / ".local" / "share" / "clipshelf"))
DB_PATH = DATA_DIR / "clipshelf.db"
LOG_PATH = DATA_DIR / "clipshelf.log"

POLL_INTERVAL = 0.5  # seconds between clipboard checks
MAX_HISTORY_ITEMS = 50  # oldest history items beyond this are dropped
PREVIEW_LENGTH = 50  # characters shown in menu item
PASTEBOARD_TEXT_TYPE = "public.utf8-plain-text"  # NSPasteboardTypeString

HISTORY_KEY = "ClipboardHistory"
FAVORITES_KEY = "ClipboardFavorites"
CATEGORIES_KEY = "ClipboardCategories"
FOLDERS_KEY = "FavoriteFolders"


def _parse_menu_history_count() -> int:
    raw = os.environ.get("CLIPSHELF_MENU_HISTORY_COUNT")
    if raw is None:
        return 10
    try:
        value = int(raw)
    except ValueError:
        return 10
    return max(5, min(50, value))


def _parse_seed_examples() -> bool:
    raw = os.environ.get("CLIPSHELF_SEED_EXAMPLES", "")
    return raw.strip().lower() in ("1", "true", "yes", "on")


MENU_HISTORY_COUNT = _parse_menu_history_count()
SEED_EXAMPLES = _parse_seed_examples()
