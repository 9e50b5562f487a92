import logging
from uuid import UUID

import rumps

from clipshelf import __version__
from clipshelf.bootstrap import seed_examples
from clipshelf.config import DB_PATH, POLL_INTERVAL, SEED_EXAMPLES
from clipshelf.engine import ClipboardDataManager
from clipshelf.menu import MenuAction, MenuItemSpec, compute_menu_specs
from clipshelf.monitor import ClipboardMonitor
from clipshelf.storage import StorageManager
from clipshelf.utils import ensure_dirs

logger = logging.getLogger(__name__)

ENTRY_KEY_PREFIX = "clipshelf_entry_"
NEW_FOLDER_COLOR = "#FF6B6B"


def option_key_held() -> bool:
    try:
        from AppKit import NSAlternateKeyMask, NSEvent

        return bool(NSEvent.modifierFlags() & NSAlternateKeyMask)
    except Exception:
        logger.debug("Could not read modifier flags", exc_info=True)
        return False


class ClipshelfApp(rumps.App):
    def __init__(self):
        super().__init__("Clipshelf", title="📋", quit_button=None)
        self._init_app()

    def _init_app(self) -> None:
        """Initialize app components. Separated for testability."""
        ensure_dirs()
        self._storage = StorageManager(DB_PATH)
        self._manager = ClipboardDataManager(self._storage)
        if SEED_EXAMPLES:
            seed_examples(self._manager)
        self._monitor = ClipboardMonitor(self._manager)
        self._entry_ids: dict[str, UUID] = {}
        self._unsubscribe = self._manager.subscribe(self._refresh_menu)
        self._build_menu()

    def _build_menu(self) -> None:
        self.menu.clear()
        self._entry_ids.clear()
        items = [self._render_single_spec(spec) for spec in compute_menu_specs(self._manager)]
        self.menu = [rumps.MenuItem(f"Clipshelf v{__version__}"), None, *items]

    def _callback_for(self, action: MenuAction | None):
        return {
            MenuAction.COPY_HISTORY: self._on_history_click,
            MenuAction.COPY_SNIPPET: self._on_snippet_click,
            MenuAction.NEW_FOLDER: self._on_new_folder,
            MenuAction.CLEAR_HISTORY: self._on_clear,
            MenuAction.QUIT: self._on_quit,
        }.get(action)

    def _render_single_spec(self, spec: MenuItemSpec | None) -> rumps.MenuItem | None:
        if spec is None:
            return None

        if spec.is_submenu and spec.children:
            submenu = rumps.MenuItem(spec.title)
            for child in spec.children:
                submenu.add(self._render_single_spec(child))
            return submenu

        item = rumps.MenuItem(spec.title, callback=self._callback_for(spec.action))
        if spec.item_id is not None:
            key = f"{ENTRY_KEY_PREFIX}{spec.item_id}"
            self._entry_ids[key] = spec.item_id
            item._id = key
        return item

    def _refresh_menu(self) -> None:
        self._build_menu()

    @rumps.timer(POLL_INTERVAL)
    def _poll_clipboard(self, _sender) -> None:
        self._monitor.check_clipboard()

    def _item_id_for(self, sender) -> UUID | None:
        return self._entry_ids.get(getattr(sender, "_id", ""))

    def _on_history_click(self, sender) -> None:
        item = self._manager.get_history_item(self._item_id_for(sender))
        if item is None:
            return
        if option_key_held():
            if self._manager.add_to_favorites(item) is not None:
                rumps.notification("Clipshelf", "", "Saved as snippet", sound=False)
            return
        self._monitor.copy_to_clipboard(item.content)

    def _on_snippet_click(self, sender) -> None:
        item = self._manager.get_favorite_item(self._item_id_for(sender))
        if item is None:
            return
        if option_key_held():
            self._manager.remove_from_favorites(item)
            rumps.notification("Clipshelf", "", "Snippet removed", sound=False)
            return
        self._monitor.copy_to_clipboard(item.content)

    def _on_new_folder(self, _sender) -> None:
        response = rumps.Window(
            message="Folder name:",
            title="New Snippet Folder",
            default_text="",
            ok="Create",
            cancel="Cancel",
            dimensions=(300, 24),
        ).run()
        name = response.text.strip()
        if response.clicked and name:
            self._manager.add_favorite_folder(name, NEW_FOLDER_COLOR)

    def _on_clear(self, _sender) -> None:
        if rumps.alert("Clipshelf", "Clear all clipboard history?", ok="Clear", cancel="Cancel"):
            self._manager.clear_history()

    def _on_quit(self, _sender) -> None:
        self._unsubscribe()
        self._storage.close()
        rumps.quit_application()
