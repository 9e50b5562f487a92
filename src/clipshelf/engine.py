import logging
import sqlite3
import uuid
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import datetime
from typing import Any
from uuid import UUID

from clipshelf import codec
from clipshelf.config import CATEGORIES_KEY, FAVORITES_KEY, FOLDERS_KEY, HISTORY_KEY, MAX_HISTORY_ITEMS
from clipshelf.events import ChangeNotifier, Listener
from clipshelf.models import DEFAULT_CATEGORY, PRESET_CATEGORIES, Category, ClipboardItem, FavoriteFolder
from clipshelf.storage import StorageManager
from clipshelf.utils import contains_text, move_elements

logger = logging.getLogger(__name__)


def _id_of(entity: Any) -> Any:
    """Accept either an entity or its bare id."""
    return getattr(entity, "id", entity)


class ClipboardDataManager:
    """Owns history, snippets, categories and folders.

    Every mutation rebuilds the affected records, writes the touched
    collections through to storage and then notifies subscribers. All calls
    are expected to come from one thread (the app's main run loop).
    """

    def __init__(self, storage: StorageManager, max_history: int = MAX_HISTORY_ITEMS):
        self._storage = storage
        self._max_history = max_history
        self._notifier = ChangeNotifier()
        self._history_items: list[ClipboardItem] = []
        self._favorite_items: list[ClipboardItem] = []
        self._categories: list[Category] = []
        self._favorite_folders: list[FavoriteFolder] = []
        self.load_errors: list[str] = []
        self.last_save_error: Exception | None = None
        self._initialize()

    # -- startup --------------------------------------------------------

    def _initialize(self) -> None:
        self._load_all()
        if not self._categories:
            self._categories = list(PRESET_CATEGORIES)
            self._commit(CATEGORIES_KEY)
        self._remove_default_folders()
        self.fix_orphaned_snippets()

    def _load_all(self) -> None:
        self._history_items = self._load(HISTORY_KEY, codec.decode_items)
        self._favorite_items = self._load(FAVORITES_KEY, codec.decode_items)
        self._categories = self._load(CATEGORIES_KEY, codec.decode_categories)
        self._favorite_folders = self._load(FOLDERS_KEY, codec.decode_folders)

    def _load(self, key: str, decode: Callable[[str], list]) -> list:
        try:
            raw = self._storage.get(key)
        except sqlite3.Error:
            logger.exception("Failed to read %s", key)
            self.load_errors.append(key)
            return []
        if raw is None:
            return []
        try:
            return decode(raw)
        except codec.DecodeError:
            logger.exception("Discarding unreadable %s", key)
            self.load_errors.append(key)
            return []

    def _remove_default_folders(self) -> None:
        """Drop seeded default folders; their snippets become unfiled."""
        default_ids = {f.id for f in self._favorite_folders if f.is_default}
        if not default_ids:
            return
        self._favorite_folders = [f for f in self._favorite_folders if not f.is_default]
        self._favorite_items = [
            replace(item, favorite_folder_id=None) if item.favorite_folder_id in default_ids else item
            for item in self._favorite_items
        ]
        logger.info("Removed %d default folder(s)", len(default_ids))
        self._commit(FOLDERS_KEY, FAVORITES_KEY)

    # -- persistence ----------------------------------------------------

    def _encode(self, key: str) -> str:
        if key == HISTORY_KEY:
            return codec.encode_items(self._history_items)
        if key == FAVORITES_KEY:
            return codec.encode_items(self._favorite_items)
        if key == CATEGORIES_KEY:
            return codec.encode_categories(self._categories)
        return codec.encode_folders(self._favorite_folders)

    def _commit(self, *keys: str) -> None:
        try:
            self._storage.set_many({key: self._encode(key) for key in keys})
        except (sqlite3.Error, TypeError, ValueError) as exc:
            logger.exception("Failed to save %s", ", ".join(keys))
            self.last_save_error = exc
        else:
            self.last_save_error = None
        self._notifier.publish()

    # -- change notification ---------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self._notifier.subscribe(listener)

    # -- collections ------------------------------------------------------

    @property
    def history_items(self) -> list[ClipboardItem]:
        return list(self._history_items)

    @property
    def favorite_items(self) -> list[ClipboardItem]:
        return list(self._favorite_items)

    @property
    def categories(self) -> list[Category]:
        return list(self._categories)

    @property
    def favorite_folders(self) -> list[FavoriteFolder]:
        return list(self._favorite_folders)

    @property
    def default_category(self) -> Category:
        for category in self._categories:
            if category.is_default:
                return category
        return DEFAULT_CATEGORY

    # -- history ----------------------------------------------------------

    def add_to_history(self, text: str) -> ClipboardItem | None:
        if not text or not text.strip():
            return None
        if self._history_items and self._history_items[0].content == text:
            return None

        item = ClipboardItem.create(text, category_id=self.default_category.id)
        self._history_items.insert(0, item)
        del self._history_items[self._max_history:]
        self._commit(HISTORY_KEY)
        return item

    def remove_from_history(self, item: ClipboardItem | UUID) -> None:
        if self._remove_by_id(self._history_items, _id_of(item)):
            self._commit(HISTORY_KEY)

    def clear_history(self) -> None:
        self._history_items.clear()
        self._commit(HISTORY_KEY)

    def get_history_item(self, item_id: UUID) -> ClipboardItem | None:
        return next((i for i in self._history_items if i.id == item_id), None)

    # -- favorites / snippets ----------------------------------------------

    def _has_favorite_content(self, content: str) -> bool:
        return any(f.content == content for f in self._favorite_items)

    def add_to_favorites(self, item: ClipboardItem, folder_id: UUID | None = None) -> ClipboardItem | None:
        if self._has_favorite_content(item.content):
            return None

        favorite = ClipboardItem.create(
            item.content,
            is_favorite=True,
            category_id=item.category_id,
            favorite_folder_id=folder_id,
            description=item.description,
        )
        self._favorite_items.append(favorite)
        self._commit(FAVORITES_KEY)
        return favorite

    def add_snippet(
        self,
        content: str,
        folder_id: UUID | None = None,
        description: str = "",
        category_id: UUID | None = None,
    ) -> ClipboardItem | None:
        """Register a snippet directly, without a history item behind it."""
        if not content or not content.strip():
            return None
        if self._has_favorite_content(content):
            return None

        snippet = ClipboardItem.create(
            content,
            is_favorite=True,
            category_id=category_id or self.default_category.id,
            favorite_folder_id=folder_id,
            description=description,
        )
        self._favorite_items.append(snippet)
        self._commit(FAVORITES_KEY)
        return snippet

    def remove_from_favorites(self, item: ClipboardItem | UUID) -> None:
        if self._remove_by_id(self._favorite_items, _id_of(item)):
            self._commit(FAVORITES_KEY)

    def clear_favorites(self) -> None:
        self._favorite_items.clear()
        self._commit(FAVORITES_KEY)

    def get_favorite_item(self, item_id: UUID) -> ClipboardItem | None:
        return next((i for i in self._favorite_items if i.id == item_id), None)

    def change_favorite_folder(self, item: ClipboardItem | UUID, folder_id: UUID | None) -> None:
        changed = self._replace_by_id(
            self._favorite_items,
            _id_of(item),
            lambda current: replace(current, favorite_folder_id=folder_id),
        )
        if changed:
            self._commit(FAVORITES_KEY)

    def update_favorite_item(self, item: ClipboardItem) -> None:
        if not item.content.strip():
            return
        if self._replace_by_id(self._favorite_items, item.id, lambda _current: item):
            self._commit(FAVORITES_KEY)

    def move_snippets_to_folder(self, item_ids: Iterable[ClipboardItem | UUID], folder_id: UUID | None) -> int:
        moved = 0
        for item_id in item_ids:
            if self._replace_by_id(
                self._favorite_items,
                _id_of(item_id),
                lambda current: replace(current, favorite_folder_id=folder_id),
            ):
                moved += 1
        if moved:
            self._commit(FAVORITES_KEY)
        return moved

    def fix_orphaned_snippets(self) -> int:
        """Unfile snippets whose folder no longer exists. Returns the number repaired."""
        valid_ids = {f.id for f in self._favorite_folders}
        repaired = 0
        items = []
        for item in self._favorite_items:
            if item.favorite_folder_id is not None and item.favorite_folder_id not in valid_ids:
                item = replace(item, favorite_folder_id=None)
                repaired += 1
            items.append(item)
        if repaired:
            self._favorite_items = items
            logger.info("Unfiled %d orphaned snippet(s)", repaired)
            self._commit(FAVORITES_KEY)
        return repaired

    def _snippets_in(self, folder_id: UUID | None) -> list[ClipboardItem]:
        return [i for i in self._favorite_items if i.favorite_folder_id == folder_id]

    def _apply_scoped_order(self, folder_id: UUID | None, ordered: list[ClipboardItem]) -> None:
        others = [i for i in self._favorite_items if i.favorite_folder_id != folder_id]
        self._favorite_items = ordered + others
        self._commit(FAVORITES_KEY)

    def reorder_snippets(self, from_offsets: Iterable[int], to_offset: int, folder_id: UUID | None = None) -> None:
        """Move the snippets at ``from_offsets`` of a folder to ``to_offset``.

        Offsets index the folder's snippets (``None`` for unfiled) in stored
        order. The folder's snippets are written first, everything else
        keeps its relative order behind them.
        """
        scoped = self._snippets_in(folder_id)
        self._apply_scoped_order(folder_id, move_elements(scoped, from_offsets, to_offset))

    def reorder_snippets_in_folder(
        self, new_order: Iterable[ClipboardItem | UUID], folder_id: UUID | None = None
    ) -> None:
        """Store the folder's snippets in ``new_order``.

        Entries that are not in the folder are ignored; folder snippets
        missing from ``new_order`` follow in their previous order.
        """
        scoped = self._snippets_in(folder_id)
        remaining = {i.id: i for i in scoped}
        ordered = []
        for entry in new_order:
            current = remaining.pop(_id_of(entry), None)
            if current is not None:
                ordered.append(current)
        ordered.extend(i for i in scoped if i.id in remaining)
        self._apply_scoped_order(folder_id, ordered)

    # -- categories -------------------------------------------------------

    def add_category(self, name: str, color: str) -> Category:
        category = Category(id=uuid.uuid4(), name=name, color=color)
        self._categories.append(category)
        self._commit(CATEGORIES_KEY)
        return category

    def delete_category(self, category: Category | UUID) -> None:
        stored = next((c for c in self._categories if c.id == _id_of(category)), None)
        if stored is None or stored.is_default:
            return

        default_id = self.default_category.id
        self._history_items = self._repoint_category(self._history_items, stored.id, default_id)
        self._favorite_items = self._repoint_category(self._favorite_items, stored.id, default_id)
        self._categories = [c for c in self._categories if c.id != stored.id]
        self._commit(HISTORY_KEY, FAVORITES_KEY, CATEGORIES_KEY)

    @staticmethod
    def _repoint_category(items: list[ClipboardItem], old_id: UUID, new_id: UUID) -> list[ClipboardItem]:
        return [replace(i, category_id=new_id) if i.category_id == old_id else i for i in items]

    def update_category(self, category: Category | UUID, name: str, color: str) -> None:
        changed = self._replace_by_id(
            self._categories,
            _id_of(category),
            lambda current: replace(current, name=name, color=color),
        )
        if changed:
            self._commit(CATEGORIES_KEY)

    def change_item_category(self, item: ClipboardItem | UUID, category_id: UUID) -> None:
        """Recategorize the item with this id in history and/or favorites.

        Favorite copies of a history item carry their own ids and are not
        touched.
        """
        item_id = _id_of(item)

        def update(current: ClipboardItem) -> ClipboardItem:
            return replace(current, category_id=category_id)

        keys = []
        if self._replace_by_id(self._history_items, item_id, update):
            keys.append(HISTORY_KEY)
        if self._replace_by_id(self._favorite_items, item_id, update):
            keys.append(FAVORITES_KEY)
        if keys:
            self._commit(*keys)

    def get_category(self, category_id: UUID | None) -> Category:
        for category in self._categories:
            if category.id == category_id:
                return category
        return self.default_category

    # -- folders ----------------------------------------------------------

    def add_favorite_folder(self, name: str, color: str) -> FavoriteFolder:
        folder = FavoriteFolder(id=uuid.uuid4(), name=name, color=color, created_at=datetime.now())
        self._favorite_folders.append(folder)
        self._commit(FOLDERS_KEY)
        return folder

    def delete_favorite_folder(self, folder: FavoriteFolder | UUID) -> None:
        stored = self.get_favorite_folder(_id_of(folder))
        if stored is None or stored.is_default:
            return

        self._favorite_items = [
            replace(i, favorite_folder_id=None) if i.favorite_folder_id == stored.id else i
            for i in self._favorite_items
        ]
        self._favorite_folders = [f for f in self._favorite_folders if f.id != stored.id]
        self._commit(FAVORITES_KEY, FOLDERS_KEY)

    def update_favorite_folder(self, folder: FavoriteFolder | UUID, name: str, color: str) -> None:
        changed = self._replace_by_id(
            self._favorite_folders,
            _id_of(folder),
            lambda current: replace(current, name=name, color=color),
        )
        if changed:
            self._commit(FOLDERS_KEY)

    def get_favorite_folder(self, folder_id: UUID | None) -> FavoriteFolder | None:
        if folder_id is None:
            return None
        return next((f for f in self._favorite_folders if f.id == folder_id), None)

    # -- grouped and filtered views -----------------------------------------

    def get_items_by_category(self) -> dict[UUID, list[ClipboardItem]]:
        grouped: dict[UUID, list[ClipboardItem]] = {}
        for item in self._history_items:
            grouped.setdefault(item.category_id, []).append(item)
        return grouped

    def get_favorites_by_folder(self) -> dict[UUID | None, list[ClipboardItem]]:
        grouped: dict[UUID | None, list[ClipboardItem]] = {}
        for item in self._favorite_items:
            grouped.setdefault(item.favorite_folder_id, []).append(item)
        return grouped

    def filter_history(self, query: str = "", category_id: UUID | None = None) -> list[ClipboardItem]:
        return [
            i for i in self._history_items
            if (category_id is None or i.category_id == category_id) and contains_text(i.content, query)
        ]

    def filter_favorites(self, query: str = "", folder_id: UUID | None = None) -> list[ClipboardItem]:
        return [
            i for i in self._favorite_items
            if (folder_id is None or i.favorite_folder_id == folder_id) and contains_text(i.content, query)
        ]

    # -- helpers ------------------------------------------------------------

    @staticmethod
    def _replace_by_id(records: list, record_id: Any, update: Callable[[Any], Any]) -> bool:
        for index, current in enumerate(records):
            if current.id == record_id:
                records[index] = update(current)
                return True
        return False

    @staticmethod
    def _remove_by_id(records: list, record_id: Any) -> bool:
        for index, current in enumerate(records):
            if current.id == record_id:
                del records[index]
                return True
        return False
