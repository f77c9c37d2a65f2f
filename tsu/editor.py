"""Editor state: text buffer, file handling and editor-level updates."""

from __future__ import annotations

import bisect
import enum
import errno
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, NamedTuple, Optional, Union

from tsu.modal import Modal, ModalEvent, ModalMessage

TITLE = "tsu"
NEW_FILE_LABEL = "New file"
DEFAULT_SYNTAX = "rs"
STATUS_PATH_LIMIT = 60
STATUS_PATH_TAIL = 40

_LINE_BREAK = re.compile(r"\r\n|\n|\r")


class HighlighterTheme(enum.Enum):
    """Syntax highlighting themes."""

    SOLARIZED_DARK = "Solarized Dark"
    BASE16_MOCHA = "Mocha"
    BASE16_OCEAN = "Ocean"
    BASE16_EIGHTIES = "Eighties"
    INSPIRED_GITHUB = "Inspired GitHub"

    def __str__(self) -> str:
        return self.value

    def is_dark(self) -> bool:
        """Whether the theme has a dark background."""
        return self is not HighlighterTheme.INSPIRED_GITHUB

    @property
    def pygments_style(self) -> str:
        """Name of the closest matching pygments style."""
        return _PYGMENTS_STYLES[self]


_PYGMENTS_STYLES = {
    HighlighterTheme.SOLARIZED_DARK: "solarized-dark",
    HighlighterTheme.BASE16_MOCHA: "monokai",
    HighlighterTheme.BASE16_OCEAN: "native",
    HighlighterTheme.BASE16_EIGHTIES: "fruity",
    HighlighterTheme.INSPIRED_GITHUB: "default",
}


class WindowTheme(enum.Enum):
    """Overall window appearance."""

    DARK = "dark"
    LIGHT = "light"


class EditorError(Exception):
    """Base class for editor file errors."""


class DialogClosed(EditorError):
    """The user dismissed a file dialog without choosing a file."""

    def __init__(self) -> None:
        super().__init__("dialog closed")


class FileIOError(EditorError):
    """Reading or writing a file failed."""

    def __init__(self, kind: str, message: str = "") -> None:
        super().__init__(message or kind)
        self.kind = kind


def _io_error(exc: Exception) -> FileIOError:
    if isinstance(exc, UnicodeError):
        return FileIOError("InvalidData", str(exc))
    if isinstance(exc, OSError) and exc.errno is not None:
        return FileIOError(errno.errorcode.get(exc.errno, "unknown"), str(exc))
    return FileIOError(type(exc).__name__, str(exc))


class ActionKind(enum.Enum):
    """Kinds of action a text buffer understands."""

    MOVE = "move"
    SELECT = "select"
    SELECT_WORD = "select_word"
    SELECT_LINE = "select_line"
    SELECT_ALL = "select_all"
    CLICK = "click"
    INSERT = "insert"
    PASTE = "paste"
    ENTER = "enter"
    BACKSPACE = "backspace"
    DELETE = "delete"


_EDIT_KINDS = frozenset(
    {ActionKind.INSERT, ActionKind.PASTE, ActionKind.ENTER, ActionKind.BACKSPACE, ActionKind.DELETE}
)


class Motion(enum.Enum):
    """Cursor motions."""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    WORD_LEFT = "word_left"
    WORD_RIGHT = "word_right"
    HOME = "home"
    END = "end"
    DOCUMENT_START = "document_start"
    DOCUMENT_END = "document_end"


@dataclass(frozen=True)
class Action:
    """A single user action on the text buffer."""

    kind: ActionKind
    motion: Optional[Motion] = None
    text: str = ""
    position: Optional[tuple[int, int]] = None

    def __post_init__(self) -> None:
        if self.kind in (ActionKind.MOVE, ActionKind.SELECT) and self.motion is None:
            raise ValueError(f"{self.kind.value} needs a motion")
        if self.kind is ActionKind.CLICK and self.position is None:
            raise ValueError("click needs a position")
        if self.kind is ActionKind.INSERT and len(self.text) != 1:
            raise ValueError("insert takes exactly one character")

    @classmethod
    def move(cls, motion: Motion) -> Action:
        return cls(ActionKind.MOVE, motion=motion)

    @classmethod
    def select(cls, motion: Motion) -> Action:
        return cls(ActionKind.SELECT, motion=motion)

    @classmethod
    def select_word(cls) -> Action:
        return cls(ActionKind.SELECT_WORD)

    @classmethod
    def select_line(cls) -> Action:
        return cls(ActionKind.SELECT_LINE)

    @classmethod
    def select_all(cls) -> Action:
        return cls(ActionKind.SELECT_ALL)

    @classmethod
    def click(cls, line: int, column: int) -> Action:
        return cls(ActionKind.CLICK, position=(line, column))

    @classmethod
    def insert(cls, char: str) -> Action:
        return cls(ActionKind.INSERT, text=char)

    @classmethod
    def paste(cls, text: str) -> Action:
        return cls(ActionKind.PASTE, text=text)

    @classmethod
    def enter(cls) -> Action:
        return cls(ActionKind.ENTER)

    @classmethod
    def backspace(cls) -> Action:
        return cls(ActionKind.BACKSPACE)

    @classmethod
    def delete(cls) -> Action:
        return cls(ActionKind.DELETE)

    def is_edit(self) -> bool:
        """Whether the action changes the text."""
        return self.kind in _EDIT_KINDS


class _Line(NamedTuple):
    start: int
    text: str
    ending: str

    @property
    def end(self) -> int:
        return self.start + len(self.text)


def _is_word(char: str) -> bool:
    return char.isalnum() or char == "_"


class Content:
    """An editable text buffer with a cursor and an optional selection."""

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._cursor = 0
        self._anchor: Optional[int] = None

    def text(self) -> str:
        """Return the full text, line endings preserved."""
        return self._text

    def line_ending(self) -> Optional[str]:
        """Return the line ending of the first line, or None if it has none."""
        match = _LINE_BREAK.search(self._text)
        return match.group() if match else None

    def cursor_position(self) -> tuple[int, int]:
        """Return the zero-based (line, column) of the cursor."""
        return self._position(self._cursor, self._lines())

    def perform(self, action: Action) -> None:
        """Apply an action to the buffer."""
        kind = action.kind
        if kind is ActionKind.MOVE:
            span = self._selection()
            if span and action.motion is Motion.LEFT:
                self._cursor = span[0]
            elif span and action.motion is Motion.RIGHT:
                self._cursor = span[1]
            else:
                self._cursor = self._moved(self._cursor, action.motion)
            self._anchor = None
        elif kind is ActionKind.SELECT:
            if self._anchor is None:
                self._anchor = self._cursor
            self._cursor = self._moved(self._cursor, action.motion)
        elif kind is ActionKind.SELECT_WORD:
            self._select_word()
        elif kind is ActionKind.SELECT_LINE:
            lines = self._lines()
            line, _ = self._position(self._cursor, lines)
            current = lines[line]
            self._anchor = current.start
            self._cursor = current.end + len(current.ending)
        elif kind is ActionKind.SELECT_ALL:
            self._anchor = 0
            self._cursor = len(self._text)
        elif kind is ActionKind.CLICK:
            line, column = action.position
            self._cursor = self._offset(line, column, self._lines())
            self._anchor = None
        elif kind in (ActionKind.INSERT, ActionKind.PASTE):
            self._replace_selection(action.text)
        elif kind is ActionKind.ENTER:
            self._replace_selection(self.line_ending() or "\n")
        elif kind is ActionKind.BACKSPACE:
            self._backspace()
        elif kind is ActionKind.DELETE:
            self._delete_forward()

    def _lines(self) -> list[_Line]:
        lines = []
        start = 0
        for match in _LINE_BREAK.finditer(self._text):
            lines.append(_Line(start, self._text[start:match.start()], match.group()))
            start = match.end()
        lines.append(_Line(start, self._text[start:], ""))
        return lines

    @staticmethod
    def _position(offset: int, lines: list[_Line]) -> tuple[int, int]:
        starts = [line.start for line in lines]
        index = max(bisect.bisect_right(starts, offset) - 1, 0)
        current = lines[index]
        return index, min(offset - current.start, len(current.text))

    @staticmethod
    def _offset(line: int, column: int, lines: list[_Line]) -> int:
        line = min(max(line, 0), len(lines) - 1)
        current = lines[line]
        return current.start + min(max(column, 0), len(current.text))

    def _selection(self) -> Optional[tuple[int, int]]:
        if self._anchor is None or self._anchor == self._cursor:
            return None
        return min(self._anchor, self._cursor), max(self._anchor, self._cursor)

    def _replace(self, start: int, end: int, new: str) -> None:
        self._text = self._text[:start] + new + self._text[end:]
        self._cursor = start + len(new)
        self._anchor = None

    def _replace_selection(self, new: str) -> None:
        start, end = self._selection() or (self._cursor, self._cursor)
        self._replace(start, end, new)

    def _backspace(self) -> None:
        span = self._selection()
        if span:
            self._replace(*span, "")
            return
        self._anchor = None
        lines = self._lines()
        line, column = self._position(self._cursor, lines)
        if column > 0:
            self._replace(self._cursor - 1, self._cursor, "")
        elif line > 0:
            previous = lines[line - 1]
            self._replace(previous.end, self._cursor, "")

    def _delete_forward(self) -> None:
        span = self._selection()
        if span:
            self._replace(*span, "")
            return
        self._anchor = None
        lines = self._lines()
        line, column = self._position(self._cursor, lines)
        current = lines[line]
        if column < len(current.text):
            self._replace(self._cursor, self._cursor + 1, "")
        elif current.ending:
            self._replace(self._cursor, self._cursor + len(current.ending), "")

    def _moved(self, offset: int, motion: Motion) -> int:
        lines = self._lines()
        line, column = self._position(offset, lines)
        current = lines[line]
        last = len(lines) - 1
        if motion is Motion.LEFT:
            if column > 0:
                return offset - 1
            return lines[line - 1].end if line > 0 else offset
        if motion is Motion.RIGHT:
            if column < len(current.text):
                return offset + 1
            return lines[line + 1].start if line < last else offset
        if motion is Motion.UP:
            return self._offset(line - 1, column, lines) if line > 0 else offset
        if motion is Motion.DOWN:
            return self._offset(line + 1, column, lines) if line < last else offset
        if motion is Motion.HOME:
            return current.start
        if motion is Motion.END:
            return current.end
        if motion is Motion.WORD_LEFT:
            if column == 0:
                return self._moved(offset, Motion.LEFT)
            index = column
            while index > 0 and not _is_word(current.text[index - 1]):
                index -= 1
            while index > 0 and _is_word(current.text[index - 1]):
                index -= 1
            return current.start + index
        if motion is Motion.WORD_RIGHT:
            if column == len(current.text):
                return self._moved(offset, Motion.RIGHT)
            index = column
            while index < len(current.text) and not _is_word(current.text[index]):
                index += 1
            while index < len(current.text) and _is_word(current.text[index]):
                index += 1
            return current.start + index
        if motion is Motion.DOCUMENT_START:
            return 0
        if motion is Motion.DOCUMENT_END:
            return len(self._text)
        raise ValueError(f"unknown motion: {motion!r}")

    def _select_word(self) -> None:
        lines = self._lines()
        line, column = self._position(self._cursor, lines)
        text = lines[line].text
        start = end = column
        while start > 0 and _is_word(text[start - 1]):
            start -= 1
        while end < len(text) and _is_word(text[end]):
            end += 1
        self._anchor = lines[line].start + start
        self._cursor = lines[line].start + end


def load_file(path: Union[str, Path]) -> tuple[Path, str]:
    """Read a UTF-8 text file, keeping its line endings."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8", newline="") as handle:
            contents = handle.read()
    except (OSError, UnicodeError) as exc:
        raise _io_error(exc) from exc
    return path, contents


def open_file(pick_file: Callable[[], Optional[Union[str, Path]]]) -> tuple[Path, str]:
    """Ask for a file with the given picker and load it."""
    picked = pick_file()
    if picked is None:
        raise DialogClosed()
    return load_file(picked)


def save_file(
    path: Optional[Union[str, Path]],
    contents: str,
    pick_save_path: Optional[Callable[[], Optional[Union[str, Path]]]] = None,
) -> Path:
    """Write contents to path, asking for a path first when none is given."""
    if path is None:
        path = pick_save_path() if pick_save_path is not None else None
        if path is None:
            raise DialogClosed()
    path = Path(path)
    try:
        with open(path, "w", encoding="utf-8", newline="") as handle:
            handle.write(contents)
    except OSError as exc:
        raise _io_error(exc) from exc
    return path


@dataclass
class Editor:
    """State of the editor window."""

    file: Optional[Path] = None
    content: Content = field(default_factory=Content)
    theme: HighlighterTheme = HighlighterTheme.SOLARIZED_DARK
    word_wrap: bool = True
    is_loading: bool = True
    is_dirty: bool = False
    modal: Optional[Modal] = None

    def perform(self, action: Action) -> None:
        """Apply an action to the buffer, marking it dirty on edits."""
        self.is_dirty = self.is_dirty or action.is_edit()
        self.content.perform(action)

    def select_theme(self, theme: HighlighterTheme) -> None:
        self.theme = theme

    def new_file(self) -> None:
        """Start an empty, unnamed buffer unless a file operation is running."""
        if not self.is_loading:
            self.file = None
            self.content = Content()

    def begin_open(self) -> bool:
        """Mark an open as started; False if one is already running."""
        if self.is_loading:
            return False
        self.is_loading = True
        return True

    def file_opened(self, result: Union[tuple[Union[str, Path], str], EditorError]) -> None:
        """Finish an open with either (path, contents) or an error."""
        self.is_loading = False
        self.is_dirty = False
        if not isinstance(result, EditorError):
            path, contents = result
            self.file = Path(path)
            self.content = Content(contents)

    def begin_save(self) -> Optional[str]:
        """Mark a save as started and return the text to write, or None if busy."""
        if self.is_loading:
            return None
        self.is_loading = True
        text = self.content.text()
        ending = self.content.line_ending()
        if ending is not None and not text.endswith(ending):
            text += ending
        return text

    def file_saved(self, result: Union[str, Path, EditorError]) -> None:
        """Finish a save with either the written path or an error."""
        self.is_loading = False
        if not isinstance(result, EditorError):
            self.file = Path(result)
            self.is_dirty = False

    def modal_message(self, message: ModalMessage) -> Optional[ModalEvent]:
        """Pass a message to the open modal, closing it when it asks to."""
        if self.modal is None:
            return None
        event = self.modal.update(message)
        if event is ModalEvent.CLOSE_MODAL:
            self.modal = None
        return event

    def open_command_palette(self) -> None:
        self.modal = Modal.COMMAND_PALETTE

    def status_path(self) -> str:
        """Path shown in the status bar, shortened when long."""
        if self.file is None:
            return NEW_FILE_LABEL
        path = str(self.file)
        if len(path) > STATUS_PATH_LIMIT:
            return "..." + path[-STATUS_PATH_TAIL:]
        return path

    def cursor_label(self) -> str:
        line, column = self.content.cursor_position()
        return f"{line + 1}:{column + 1}"

    def syntax_extension(self) -> str:
        """File extension used to pick a syntax highlighter."""
        if self.file is not None and self.file.suffix:
            return self.file.suffix[1:]
        return DEFAULT_SYNTAX

    def window_theme(self) -> WindowTheme:
        return WindowTheme.DARK if self.theme.is_dark() else WindowTheme.LIGHT

    def title(self) -> str:
        return TITLE