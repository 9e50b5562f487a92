"""Status-bar menu layout computed from the data manager, independent of rumps."""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from clipshelf.config import MENU_HISTORY_COUNT
from clipshelf.engine import ClipboardDataManager
from clipshelf.models import ClipboardItem


class MenuAction(str, Enum):
    COPY_HISTORY = "copy_history"
    COPY_SNIPPET = "copy_snippet"
    NEW_FOLDER = "new_folder"
    CLEAR_HISTORY = "clear_history"
    QUIT = "quit"


UNFILED_TITLE = "📁 Unfiled"


@dataclass
class MenuItemSpec:
    """Specification for a menu item, separating logic from rumps rendering."""

    title: str
    action: MenuAction | None = None
    item_id: UUID | None = None
    is_submenu: bool = False
    children: list["MenuItemSpec | None"] | None = None


def _entry_specs(items: list[ClipboardItem], action: MenuAction) -> list[MenuItemSpec | None]:
    # rumps keys menu entries by title, so number them to keep repeats apart
    return [
        MenuItemSpec(f"{index}. {item.display_text}", action=action, item_id=item.id)
        for index, item in enumerate(items, start=1)
    ]


def compute_menu_specs(
    manager: ClipboardDataManager, history_count: int = MENU_HISTORY_COUNT
) -> list[MenuItemSpec | None]:
    """Compute the status-bar menu. ``None`` entries are separators."""
    specs: list[MenuItemSpec | None] = []

    recent = manager.history_items[:history_count]
    snippets_by_folder = manager.get_favorites_by_folder()

    if recent:
        specs.append(MenuItemSpec(
            "📋 History",
            is_submenu=True,
            children=_entry_specs(recent, MenuAction.COPY_HISTORY),
        ))
        specs.append(None)

    if snippets_by_folder:
        specs.append(MenuItemSpec("Snippets"))
        used_titles = {UNFILED_TITLE}
        for folder in manager.favorite_folders:
            folder_snippets = snippets_by_folder.get(folder.id)
            if folder_snippets:
                title = f"📁 {folder.name}"
                copy = 2
                while title in used_titles:
                    title = f"📁 {folder.name} ({copy})"
                    copy += 1
                used_titles.add(title)
                specs.append(MenuItemSpec(
                    title,
                    is_submenu=True,
                    children=_entry_specs(folder_snippets, MenuAction.COPY_SNIPPET),
                ))
        unfiled = snippets_by_folder.get(None)
        if unfiled:
            specs.append(MenuItemSpec(
                UNFILED_TITLE,
                is_submenu=True,
                children=_entry_specs(unfiled, MenuAction.COPY_SNIPPET),
            ))
        specs.append(None)

    if not recent and not snippets_by_folder:
        specs.append(MenuItemSpec("(No clipboard history)"))
        specs.append(None)

    specs.extend([
        MenuItemSpec("New Folder...", action=MenuAction.NEW_FOLDER),
        MenuItemSpec("Clear History", action=MenuAction.CLEAR_HISTORY),
        None,
        MenuItemSpec("Quit", action=MenuAction.QUIT),
    ])
    return specs
