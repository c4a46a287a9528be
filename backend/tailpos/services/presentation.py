# Overview: Presentation/notification capability the POS core calls through.

"""
Side effects the till produces for the operator: audio cues, blocking
alerts and receipt printing. The host shell injects an implementation into
the PosSession; services never touch speakers or printers directly.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

BEEP_SOUND = "sound/beep-29.mp3"
CLEAR_SOUND = "sound/button-21.mp3"


class Presentation:
    """Abstract base for presentation back ends."""

    def play_sound(self, src: str) -> None:
        raise NotImplementedError

    def alert(self, message: str) -> None:
        raise NotImplementedError

    def print_receipt(self, title: str, html: str) -> None:
        raise NotImplementedError

    def beep(self) -> None:
        self.play_sound(BEEP_SOUND)

    def clear_sound(self) -> None:
        self.play_sound(CLEAR_SOUND)


class LoggingPresentation(Presentation):
    """Headless back end: records every cue in the application log."""

    def play_sound(self, src: str) -> None:
        logger.debug("sound: %s", src)

    def alert(self, message: str) -> None:
        logger.warning("alert: %s", message)

    def print_receipt(self, title: str, html: str) -> None:
        logger.info("print receipt %s (%d bytes)", title, len(html))
