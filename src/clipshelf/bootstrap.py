import logging

from clipshelf.engine import ClipboardDataManager

logger = logging.getLogger(__name__)

EXAMPLE_FOLDERS: dict[str, tuple[str, list[tuple[str, str]]]] = {
    "Greetings": (
        "#FF6B6B",
        [
            ("Thanks for reaching out! I'll get back to you shortly.", "Quick reply"),
            ("Best regards,", "Email sign-off"),
        ],
    ),
    "Code Snippets": (
        "#4ECDC4",
        [
            ('if __name__ == "__main__":\n    main()', "Python entry point"),
            ("git log --oneline --graph --decorate", "Compact git history"),
        ],
    ),
}


def seed_examples(manager: ClipboardDataManager) -> bool:
    """Create the example folders and snippets on a fresh install.

    Nothing is added if any folder already uses one of the example names.
    Returns True when the examples were created.
    """
    existing = {folder.name for folder in manager.favorite_folders}
    if existing & EXAMPLE_FOLDERS.keys():
        return False

    for name, (color, snippets) in EXAMPLE_FOLDERS.items():
        folder = manager.add_favorite_folder(name, color)
        for content, description in snippets:
            manager.add_snippet(content, folder_id=folder.id, description=description)
    logger.info("Seeded %d example folders", len(EXAMPLE_FOLDERS))
    return True
