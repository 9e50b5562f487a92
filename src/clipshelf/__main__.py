import argparse
import logging
import sys

from clipshelf.config import DB_PATH, LOG_PATH, MENU_HISTORY_COUNT
from clipshelf.engine import ClipboardDataManager
from clipshelf.storage import StorageManager
from clipshelf.utils import ensure_dirs


def print_history(manager: ClipboardDataManager, limit: int = MENU_HISTORY_COUNT) -> int:
    items = manager.history_items[:limit]
    if not items:
        print("(No clipboard history)")
        return 0
    for index, item in enumerate(items, start=1):
        category = manager.get_category(item.category_id)
        print(f"{index:>3}. [{category.name}] {item.display_text}")
    return 0


def print_snippets(manager: ClipboardDataManager) -> int:
    grouped = manager.get_favorites_by_folder()
    if not grouped:
        print("(No snippets)")
        return 0
    sections = [(folder.name, grouped.get(folder.id, [])) for folder in manager.favorite_folders]
    sections.append(("Unfiled", grouped.get(None, [])))
    for name, snippets in sections:
        if not snippets:
            continue
        print(f"{name}:")
        for snippet in snippets:
            suffix = f"  ({snippet.description})" if snippet.description else ""
            print(f"  - {snippet.display_text}{suffix}")
    return 0


def clear_history(manager: ClipboardDataManager) -> int:
    count = len(manager.history_items)
    manager.clear_history()
    print(f"Cleared {count} history item(s).")
    return 1 if manager.last_save_error else 0


def run_app():
    """Run the Clipshelf menu-bar application."""
    ensure_dirs()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(LOG_PATH),
            logging.StreamHandler(sys.stderr),
        ],
    )

    from clipshelf.app import ClipshelfApp

    app = ClipshelfApp()
    app.run()


def run_command(command: str) -> int:
    ensure_dirs()
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    with StorageManager(DB_PATH) as storage:
        manager = ClipboardDataManager(storage)
        if command == "history":
            return print_history(manager)
        if command == "snippets":
            return print_snippets(manager)
        return clear_history(manager)


def main():
    parser = argparse.ArgumentParser(
        description="Clipshelf - Clipboard history and snippets for the macOS menu bar",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  (none)      Run Clipshelf in the menu bar
  history     Print recent clipboard history
  snippets    Print snippets grouped by folder
  clear       Clear clipboard history

Examples:
  clipshelf            # Start the menu-bar app
  clipshelf snippets   # List saved snippets
""",
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=["history", "snippets", "clear"],
        help="Command to run",
    )

    args = parser.parse_args()

    if args.command:
        sys.exit(run_command(args.command))
    else:
        run_app()


if __name__ == "__main__":
    main()
