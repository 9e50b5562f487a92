import uuid
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from clipshelf.config import PREVIEW_LENGTH
from clipshelf.utils import truncate_text

DEFAULT_CATEGORY_ID = UUID("6f1c2d3e-0000-4000-8000-000000000001")


@dataclass(frozen=True)
class Category:
    id: UUID
    name: str
    color: str
    is_default: bool = False


@dataclass(frozen=True)
class FavoriteFolder:
    id: UUID
    name: str
    color: str
    is_default: bool = False
    created_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class ClipboardItem:
    """A captured clipboard text or a saved snippet.

    Stored records are never mutated; updates build a new value with the
    same ``id`` (see ``dataclasses.replace``) and swap it into place.
    """

    id: UUID
    content: str
    timestamp: datetime
    is_favorite: bool = False
    category_id: UUID = DEFAULT_CATEGORY_ID
    favorite_folder_id: UUID | None = None
    description: str = ""

    @classmethod
    def create(
        cls,
        content: str,
        is_favorite: bool = False,
        category_id: UUID = DEFAULT_CATEGORY_ID,
        favorite_folder_id: UUID | None = None,
        description: str = "",
    ) -> "ClipboardItem":
        return cls(
            id=uuid.uuid4(),
            content=content,
            timestamp=datetime.now(),
            is_favorite=is_favorite,
            category_id=category_id,
            favorite_folder_id=favorite_folder_id,
            description=description,
        )

    @property
    def display_text(self) -> str:
        return truncate_text(self.content, PREVIEW_LENGTH)


DEFAULT_CATEGORY = Category(id=DEFAULT_CATEGORY_ID, name="General", color="#007AFF", is_default=True)

PRESET_CATEGORIES: tuple[Category, ...] = (
    DEFAULT_CATEGORY,
    Category(id=UUID("6f1c2d3e-0000-4000-8000-000000000002"), name="Work", color="#34C759"),
    Category(id=UUID("6f1c2d3e-0000-4000-8000-000000000003"), name="Personal", color="#FF9500"),
    Category(id=UUID("6f1c2d3e-0000-4000-8000-000000000004"), name="Code", color="#AF52DE"),
    Category(id=UUID("6f1c2d3e-0000-4000-8000-000000000005"), name="Links", color="#5AC8FA"),
)
