import logging
from typing import Any

from clipshelf.config import PASTEBOARD_TEXT_TYPE
from clipshelf.engine import ClipboardDataManager

logger = logging.getLogger(__name__)


def general_pasteboard() -> Any:
    from AppKit import NSPasteboard

    return NSPasteboard.generalPasteboard()


class ClipboardMonitor:
    """Feeds new pasteboard text into the history.

    ``check_clipboard`` is meant to be called from a timer every
    ``POLL_INTERVAL`` seconds; it only reads the pasteboard when its change
    count moved.
    """

    def __init__(self, manager: ClipboardDataManager, pasteboard: Any = None):
        self._manager = manager
        self._pasteboard = pasteboard if pasteboard is not None else general_pasteboard()
        self._last_change_count = self._pasteboard.changeCount()

    def check_clipboard(self) -> bool:
        current_count = self._pasteboard.changeCount()
        if current_count == self._last_change_count:
            return False

        self._last_change_count = current_count

        try:
            text = self._pasteboard.stringForType_(PASTEBOARD_TEXT_TYPE)
            if text is None:
                return False
            return self._manager.add_to_history(str(text)) is not None
        except Exception:
            logger.exception("Error reading clipboard")
            return False

    def copy_to_clipboard(self, text: str) -> bool:
        """Put ``text`` on the pasteboard.

        The next poll picks it up like any other copy, which moves it back
        to the top of the history.
        """
        try:
            self._pasteboard.clearContents()
            return bool(self._pasteboard.setString_forType_(text, PASTEBOARD_TEXT_TYPE))
        except Exception:
            logger.exception("Error writing to clipboard")
            return False
