from clipshelf.config import DATA_DIR


def truncate_text(text: str, max_len: int) -> str:
    single_line = " ".join(text.split())
    if len(single_line) <= max_len:
        return single_line
    return single_line[: max_len - 3] + "..."


def contains_text(content: str, query: str) -> bool:
    """Case-insensitive substring test; an empty query matches everything."""
    if not query:
        return True
    return query.casefold() in content.casefold()


def ensure_dirs() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def move_elements(items: list, from_offsets, to_offset: int) -> list:
    """Return a copy of ``items`` with the elements at ``from_offsets`` moved before ``to_offset``.

    ``to_offset`` refers to positions in the original list, so moving an
    element to ``len(items)`` places it last.
    """
    offsets = sorted({o for o in from_offsets if 0 <= o < len(items)})
    if not offsets:
        return list(items)
    moving = [items[o] for o in offsets]
    skipped = set(offsets)
    remaining = [item for index, item in enumerate(items) if index not in skipped]
    insert_at = to_offset - sum(1 for o in offsets if o < to_offset)
    insert_at = max(0, min(insert_at, len(remaining)))
    return remaining[:insert_at] + moving + remaining[insert_at:]
