"""Keyboard shortcuts of the designer, independent of any GUI toolkit.

The host translates its native key events into :class:`KeyStroke` values and
calls :meth:`ShortcutRouter.handle`; a True return means the host should
swallow the event (suppress the platform's default behaviour).
"""
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Protocol

KEY_DELETE = "delete"
KEY_BACKSPACE = "backspace"
KEY_ESCAPE = "escape"


@dataclass(frozen=True)
class KeyStroke:
    key: str                           # lower-case letter, or KEY_* name
    ctrl: bool = False
    meta: bool = False                 # Cmd on macOS
    shift: bool = False
    alt: bool = False
    text_input_focused: bool = False   # focus is in an input/textarea/editable

    @property
    def command(self) -> bool:
        return self.ctrl or self.meta


class ShortcutActions(Protocol):
    """What the router drives; implemented by the template editor."""

    @property
    def selected_id(self) -> Optional[str]: ...

    def copy_selected(self) -> bool: ...

    def paste(self) -> bool: ...

    def delete_selected(self) -> bool: ...

    def deselect(self) -> bool: ...

    def undo(self) -> bool: ...

    def redo(self) -> bool: ...


class ShortcutRouter:
    def __init__(self, actions: ShortcutActions):
        self._actions = actions
        self._enabled = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        self._enabled = False

    @contextmanager
    def active(self) -> Iterator["ShortcutRouter"]:
        """Enable the router for the duration of the block (designer mounted)."""
        self.enable()
        try:
            yield self
        finally:
            self.disable()

    def handle(self, stroke: KeyStroke) -> bool:
        if not self._enabled or stroke.text_input_focused:
            return False
        a = self._actions
        key = stroke.key.lower()

        if stroke.command and key == "c":
            if a.selected_id is None:
                return False
            a.copy_selected()
            return True

        if stroke.command and key == "v":
            a.paste()
            return True

        if stroke.command and (key == "y" or (key == "z" and stroke.shift)):
            a.redo()
            return True

        if stroke.command and key == "z":
            a.undo()
            return True

        if key in (KEY_DELETE, KEY_BACKSPACE) and not stroke.command:
            if a.selected_id is None:
                return False
            a.delete_selected()
            return True

        if key == KEY_ESCAPE:
            if a.selected_id is None:
                return False
            a.deselect()
            return True

        return False
