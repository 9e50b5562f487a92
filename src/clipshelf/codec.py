"""JSON encoding of the persisted collections.

Each collection is stored as a JSON array of objects. Decoding accepts
records written before ``categoryId``, ``favoriteFolderId`` and
``description`` existed and fills in their defaults.
"""

import json
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any, TypeVar
from uuid import UUID

from clipshelf.models import DEFAULT_CATEGORY_ID, Category, ClipboardItem, FavoriteFolder

T = TypeVar("T")


class DecodeError(ValueError):
    """Raised when a stored collection cannot be decoded."""


def _encode_datetime(value: datetime) -> str:
    return value.isoformat()


def _decode_datetime(value: Any) -> datetime:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value)
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    raise DecodeError(f"invalid timestamp: {value!r}")


def _decode_optional_uuid(value: Any) -> UUID | None:
    if value is None:
        return None
    try:
        return UUID(str(value))
    except ValueError:
        return None


def _text_field(data: dict[str, Any], key: str, allow_blank: bool = True) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise DecodeError(f"{key} must be a string, got {type(value).__name__}")
    if not allow_blank and not value.strip():
        raise DecodeError(f"{key} is blank")
    return value


def item_to_dict(item: ClipboardItem) -> dict[str, Any]:
    return {
        "id": str(item.id),
        "content": item.content,
        "timestamp": _encode_datetime(item.timestamp),
        "isFavorite": item.is_favorite,
        "categoryId": str(item.category_id),
        "favoriteFolderId": str(item.favorite_folder_id) if item.favorite_folder_id else None,
        "description": item.description,
    }


def item_from_dict(data: dict[str, Any]) -> ClipboardItem:
    try:
        category_id = UUID(str(data["categoryId"]))
    except (KeyError, ValueError):
        category_id = DEFAULT_CATEGORY_ID
    return ClipboardItem(
        id=UUID(str(data["id"])),
        content=_text_field(data, "content", allow_blank=False),
        timestamp=_decode_datetime(data["timestamp"]),
        is_favorite=bool(data.get("isFavorite", False)),
        category_id=category_id,
        favorite_folder_id=_decode_optional_uuid(data.get("favoriteFolderId")),
        description=_text_field(data, "description") if data.get("description") is not None else "",
    )


def category_to_dict(category: Category) -> dict[str, Any]:
    return {
        "id": str(category.id),
        "name": category.name,
        "color": category.color,
        "isDefault": category.is_default,
    }


def category_from_dict(data: dict[str, Any]) -> Category:
    return Category(
        id=UUID(str(data["id"])),
        name=_text_field(data, "name"),
        color=_text_field(data, "color"),
        is_default=bool(data.get("isDefault", False)),
    )


def folder_to_dict(folder: FavoriteFolder) -> dict[str, Any]:
    return {
        "id": str(folder.id),
        "name": folder.name,
        "color": folder.color,
        "isDefault": folder.is_default,
        "createdAt": _encode_datetime(folder.created_at),
    }


def folder_from_dict(data: dict[str, Any]) -> FavoriteFolder:
    created_at = data.get("createdAt")
    return FavoriteFolder(
        id=UUID(str(data["id"])),
        name=_text_field(data, "name"),
        color=_text_field(data, "color"),
        is_default=bool(data.get("isDefault", False)),
        created_at=_decode_datetime(created_at) if created_at is not None else datetime.now(),
    )


def _encode(records: Iterable[T], to_dict: Callable[[T], dict[str, Any]]) -> str:
    return json.dumps([to_dict(r) for r in records], ensure_ascii=False)


def _decode(raw: str | bytes, from_dict: Callable[[dict[str, Any]], T]) -> list[T]:
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(f"malformed JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise DecodeError(f"expected a JSON array, got {type(payload).__name__}")
    try:
        return [from_dict(record) for record in payload]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise DecodeError(f"malformed record: {exc!r}") from exc


def encode_items(items: Iterable[ClipboardItem]) -> str:
    return _encode(items, item_to_dict)


def decode_items(raw: str | bytes) -> list[ClipboardItem]:
    return _decode(raw, item_from_dict)


def encode_categories(categories: Iterable[Category]) -> str:
    return _encode(categories, category_to_dict)


def decode_categories(raw: str | bytes) -> list[Category]:
    return _decode(raw, category_from_dict)


def encode_folders(folders: Iterable[FavoriteFolder]) -> str:
    return _encode(folders, folder_to_dict)


def decode_folders(raw: str | bytes) -> list[FavoriteFolder]:
    return _decode(raw, folder_from_dict)
