"""Modal dialogs that can be shown on top of the editor."""

from __future__ import annotations

import enum

COMMAND_PALETTE_TITLE = "Command Palette"
PALETTE_MAX_WIDTH = 400
PALETTE_PADDING = 25


def command_palette_title() -> str:
    """Return the heading shown inside the command palette."""
    return COMMAND_PALETTE_TITLE


class ModalMessage(enum.Enum):
    """Messages a modal can receive."""

    CANCEL = "cancel"


class ModalEvent(enum.Enum):
    """Events a modal reports back to the editor."""

    CLOSE_MODAL = "close_modal"


class Modal(enum.Enum):
    """The kinds of modal the editor can display."""

    COMMAND_PALETTE = "command_palette"

    def update(self, message: ModalMessage) -> ModalEvent | None:
        """Handle a message and return the event it produces, if any."""
        if message is ModalMessage.CANCEL:
            return ModalEvent.CLOSE_MODAL
        raise ValueError(f"unknown modal message: {message!r}")

    def title(self) -> str:
        """Return the text the modal displays."""
        if self is Modal.COMMAND_PALETTE:
            return command_palette_title()
        raise ValueError(f"unknown modal: {self!r}")