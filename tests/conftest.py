import uuid
from datetime import datetime
from uuid import UUID

import pytest

from clipshelf.engine import ClipboardDataManager
from clipshelf.models import DEFAULT_CATEGORY_ID, ClipboardItem
from clipshelf.storage import StorageManager


@pytest.fixture
def storage():
    mgr = StorageManager(db_path=":memory:")
    yield mgr
    mgr.close()


@pytest.fixture
def manager(storage):
    return ClipboardDataManager(storage)


@pytest.fixture
def make_item():
    """Factory fixture to create ClipboardItem instances for testing."""

    def _make_item(
        content: str = "hello world",
        is_favorite: bool = False,
        category_id: UUID = DEFAULT_CATEGORY_ID,
        favorite_folder_id: UUID | None = None,
        description: str = "",
    ) -> ClipboardItem:
        return ClipboardItem(
            id=uuid.uuid4(),
            content=content,
            timestamp=datetime(2024, 5, 1, 12, 30, 15),
            is_favorite=is_favorite,
            category_id=category_id,
            favorite_folder_id=favorite_folder_id,
            description=description,
        )

    return _make_item
