"""Command line entry point and the editor window."""

from __future__ import annotations

import argparse
import functools
import logging
from typing import Callable, Optional

from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.token import Token
from pygments.util import ClassNotFound

from tsu.editor import (
    Action,
    Content,
    Editor,
    EditorError,
    HighlighterTheme,
    WindowTheme,
    load_file,
    open_file,
    save_file,
)
from tsu.modal import PALETTE_MAX_WIDTH, PALETTE_PADDING, Modal, ModalMessage

VERSION = "0.1.0"
TRACE = 5

_LOGGER = logging.getLogger(__name__)

_LEVELS = {
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

# Black at 80% opacity, flattened: Tk frames cannot be translucent.
_BACKDROP = "#333333"
_WINDOW_COLORS = {
    WindowTheme.DARK: ("#2b2d31", "#e8e8e8"),
    WindowTheme.LIGHT: ("#f2f2f2", "#1a1a1a"),
}


def log_level(verbose: int) -> str:
    """Map the number of -v flags to a log level name."""
    if verbose < 0:
        raise ValueError("verbosity cannot be negative")
    if verbose == 0:
        return "warn"
    if verbose == 1:
        return "info"
    if verbose == 2:
        return "debug"
    return "trace"


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse the command line."""
    parser = argparse.ArgumentParser(prog="tsu", description="tsu text editor")
    parser.add_argument(
        "-v",
        dest="verbose",
        action="count",
        default=0,
        help="Increases logging verbosity (-v, -vv, -vvv)",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("file", help="File to open")
    return parser.parse_args(argv)


def _configure_logging(level_name: str) -> None:
    logging.addLevelName(TRACE, "TRACE")
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("tsu").setLevel(_LEVELS[level_name])


@functools.lru_cache(maxsize=None)
def _style(theme: HighlighterTheme):
    try:
        return get_style_by_name(theme.pygments_style)
    except ClassNotFound:
        return get_style_by_name("default")


@functools.lru_cache(maxsize=None)
def _lexer(extension: str):
    try:
        return get_lexer_for_filename(f"buffer.{extension}", stripnl=False, ensurenl=False)
    except ClassNotFound:
        return TextLexer(stripnl=False, ensurenl=False)


def _picked(value) -> Optional[str]:
    return value if isinstance(value, str) and value else None


class ModalOverlay:
    """A dimmed layer over the window with a modal panel centred on it."""

    def __init__(self, master, modal: Modal, on_blur: Callable[[], None]) -> None:
        import tkinter as tk

        self.modal = modal
        self.visible = False
        self._on_blur = on_blur
        self._backdrop = tk.Frame(master, bg=_BACKDROP, takefocus=True)
        self._panel = tk.Frame(self._backdrop, padx=PALETTE_PADDING, pady=PALETTE_PADDING)
        label = tk.Label(
            self._panel,
            text=modal.title(),
            wraplength=PALETTE_MAX_WIDTH - 2 * PALETTE_PADDING,
        )
        label.pack()
        self._panel.place(relx=0.5, rely=0.5, anchor="center")
        self._backdrop.bind("<Button-1>", self._blur)
        for widget in (self._backdrop, self._panel, label):
            widget.bind("<Escape>", self._blur)

    def show(self) -> None:
        """Cover the window and take keyboard focus."""
        self._backdrop.place(x=0, y=0, relwidth=1, relheight=1)
        self._backdrop.lift()
        self._backdrop.focus_set()
        self.visible = True

    def close(self) -> None:
        """Remove the overlay from the window."""
        self._backdrop.place_forget()
        self._backdrop.destroy()
        self.visible = False

    def _blur(self, _event=None) -> str:
        self._on_blur()
        return "break"


class EditorWindow:
    """The main window: toolbar, text area and status bar around an Editor."""

    def __init__(self, root, filename: str, editor: Optional[Editor] = None) -> None:
        self.root = root
        self.editor = editor if editor is not None else Editor()
        self._ending = "\n"
        self._overlay: Optional[ModalOverlay] = None
        self._build()
        self._finish_open(self._attempt(lambda: load_file(filename)))
        self._text.focus_set()

    def refresh(self) -> None:
        """Bring every widget in line with the editor state."""
        ed = self.editor
        self.root.title(ed.title())
        self._open_button.config(state="disabled" if ed.is_loading else "normal")
        self._save_button.config(state="normal" if ed.is_dirty else "disabled")
        self._theme_var.set(str(ed.theme))
        self._path_label.config(text=ed.status_path())
        self._cursor_label.config(text=ed.cursor_label())
        self._text.config(wrap="word" if ed.word_wrap else "none")
        self._apply_theme()
        self._highlight()
        self._sync_modal()

    def _build(self) -> None:
        import tkinter as tk
        import tkinter.font as tkfont

        root = self.root
        self._toolbar = tk.Frame(root, padx=10, pady=10)
        self._toolbar.pack(fill="x")
        self._new_button = tk.Button(self._toolbar, text="New file", command=self._new)
        self._open_button = tk.Button(self._toolbar, text="Open file", command=self._open)
        self._save_button = tk.Button(self._toolbar, text="Save file", command=self._save)
        for button in (self._new_button, self._open_button, self._save_button):
            button.pack(side="left", padx=(0, 10))
        self._theme_var = tk.StringVar(value=str(self.editor.theme))
        self._theme_menu = tk.OptionMenu(
            self._toolbar,
            self._theme_var,
            *(str(theme) for theme in HighlighterTheme),
            command=self._on_theme,
        )
        self._theme_menu.pack(side="right")

        self._text = tk.Text(root, font="TkFixedFont", undo=False, borderwidth=0)
        self._text.pack(fill="both", expand=True, padx=10)
        base = tkfont.nametofont("TkFixedFont").actual()
        self._font = (base["family"], base["size"])

        self._status = tk.Frame(root, padx=10, pady=10)
        self._status.pack(fill="x")
        self._path_label = tk.Label(self._status, anchor="w")
        self._path_label.pack(side="left")
        self._cursor_label = tk.Label(self._status, anchor="e")
        self._cursor_label.pack(side="right")

        self._text.bind("<<Modified>>", self._on_modified)
        self._text.bind("<KeyRelease>", self._on_cursor)
        self._text.bind("<ButtonRelease-1>", self._on_cursor)
        self._text.bind("<Control-s>", self._on_save_key)
        self._text.bind("<Control-P>", self._on_palette_key)
        self._text.bind("<Escape>", self._on_escape)

    @staticmethod
    def _attempt(operation):
        try:
            return operation()
        except EditorError as exc:
            _LOGGER.warning("file operation failed: %s", exc)
            return exc

    def _load_buffer(self) -> None:
        content = self.editor.content
        self._ending = content.line_ending() or "\n"
        body = content.text().replace("\r\n", "\n").replace("\r", "\n")
        line, column = content.cursor_position()
        self._text.delete("1.0", "end")
        self._text.insert("1.0", body)
        self._text.mark_set("insert", f"{line + 1}.{column}")
        self._text.edit_modified(False)

    def _widget_cursor(self) -> tuple[int, int]:
        line, column = self._text.index("insert").split(".")
        return int(line) - 1, int(column)

    def _on_modified(self, _event=None) -> None:
        if not self._text.edit_modified():
            return
        self._text.edit_modified(False)
        body = self._text.get("1.0", "end-1c")
        if self._ending != "\n":
            body = body.replace("\n", self._ending)
        content = Content(body)
        content.perform(Action.click(*self._widget_cursor()))
        self.editor.content = content
        self.editor.is_dirty = True
        self.refresh()

    def _on_cursor(self, _event=None) -> None:
        self.editor.perform(Action.click(*self._widget_cursor()))
        self._cursor_label.config(text=self.editor.cursor_label())

    def _on_save_key(self, _event=None) -> str:
        _LOGGER.debug("CTRL + S pressed")
        self._save()
        return "break"

    def _on_palette_key(self, _event=None) -> str:
        _LOGGER.debug("CTRL + SHIFT + P pressed")
        self.editor.open_command_palette()
        self.refresh()
        return "break"

    def _on_escape(self, _event=None) -> str:
        _LOGGER.debug("ESC pressed")
        self.root.focus_set()
        return "break"

    def _on_theme(self, value: str) -> None:
        self.editor.select_theme(HighlighterTheme(value))
        self.refresh()

    def _cancel_modal(self) -> None:
        self.editor.modal_message(ModalMessage.CANCEL)
        self.refresh()

    def _new(self) -> None:
        was_loading = self.editor.is_loading
        self.editor.new_file()
        if not was_loading:
            self._load_buffer()
        self.refresh()

    def _open(self) -> None:
        if not self.editor.begin_open():
            return
        self.refresh()
        self._finish_open(self._attempt(lambda: open_file(self._ask_open_path)))

    def _finish_open(self, result) -> None:
        self.editor.file_opened(result)
        if not isinstance(result, EditorError):
            self._load_buffer()
        self.refresh()

    def _save(self) -> None:
        text = self.editor.begin_save()
        if text is None:
            return
        self.refresh()
        result = self._attempt(lambda: save_file(self.editor.file, text, self._ask_save_path))
        self.editor.file_saved(result)
        self.refresh()

    def _ask_open_path(self) -> Optional[str]:
        from tkinter import filedialog

        return _picked(filedialog.askopenfilename(parent=self.root, title="Open a text file"))

    def _ask_save_path(self) -> Optional[str]:
        from tkinter import filedialog

        return _picked(filedialog.asksaveasfilename(parent=self.root))

    def _apply_theme(self) -> None:
        background, foreground = _WINDOW_COLORS[self.editor.window_theme()]
        self.root.configure(bg=background)
        for frame in (self._toolbar, self._status):
            frame.configure(bg=background)
        for label in (self._path_label, self._cursor_label):
            label.configure(bg=background, fg=foreground)

        style = _style(self.editor.theme)
        text_color = style.style_for_token(Token)["color"]
        text_fg = f"#{text_color}" if text_color else foreground
        self._text.configure(
            bg=style.background_color or background,
            fg=text_fg,
            insertbackground=text_fg,
        )

    def _highlight(self) -> None:
        style = _style(self.editor.theme)
        lexer = _lexer(self.editor.syntax_extension())
        for tag in self._text.tag_names():
            if tag.startswith("Token"):
                self._text.tag_remove(tag, "1.0", "end")

        configured: set[str] = set()
        offset = 0
        for token_type, value in lexer.get_tokens(self._text.get("1.0", "end-1c")):
            end = offset + len(value)
            if value and token_type is not Token.Text:
                tag = str(token_type)
                if tag not in configured:
                    self._configure_tag(tag, style.style_for_token(token_type))
                    configured.add(tag)
                self._text.tag_add(tag, f"1.0+{offset}c", f"1.0+{end}c")
            offset = end
        self._text.tag_raise("sel")

    def _configure_tag(self, tag: str, attributes: dict) -> None:
        options = {}
        if attributes.get("color"):
            options["foreground"] = f"#{attributes['color']}"
        if attributes.get("bgcolor"):
            options["background"] = f"#{attributes['bgcolor']}"
        weight = [word for word, on in (("bold", attributes.get("bold")), ("italic", attributes.get("italic"))) if on]
        options["font"] = (*self._font, " ".join(weight)) if weight else self._font
        self._text.tag_configure(tag, **options)

    def _sync_modal(self) -> None:
        modal = self.editor.modal
        if self._overlay is not None and self._overlay.modal is not modal:
            self._overlay.close()
            self._overlay = None
            self._text.focus_set()
        if modal is not None and self._overlay is None:
            self._overlay = ModalOverlay(self.root, modal, self._cancel_modal)
            self._overlay.show()


def main(argv: Optional[list[str]] = None) -> int:
    """Start the editor on the file named on the command line."""
    args = parse_args(argv)
    _configure_logging(log_level(args.verbose))
    _LOGGER.info("Starting tsu GUI...")

    import tkinter as tk

    root = tk.Tk()
    EditorWindow(root, args.file)
    root.mainloop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())