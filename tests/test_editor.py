import errno
from pathlib import Path

import pytest

from tsu.editor import (
    Action,
    Content,
    DialogClosed,
    Editor,
    FileIOError,
    HighlighterTheme,
    Motion,
    WindowTheme,
    load_file,
    open_file,
    save_file,
)
from tsu.modal import Modal, ModalEvent, ModalMessage


def _ready_editor(text="", path="notes.txt"):
    editor = Editor()
    editor.file_opened((Path(path), text))
    return editor


def test_only_inspired_github_is_light():
    assert HighlighterTheme.INSPIRED_GITHUB.is_dark() is False
    dark_themes = [theme for theme in list(HighlighterTheme) if theme.is_dark()]
    assert HighlighterTheme.INSPIRED_GITHUB not in dark_themes
    assert len(dark_themes) == len(HighlighterTheme) - 1


def test_edit_actions_are_edits():
    for action in (Action.insert("a"), Action.paste("xy"), Action.enter(),
                   Action.backspace(), Action.delete()):
        assert action.is_edit()


def test_non_edit_actions():
    for action in (Action.move(Motion.LEFT), Action.select(Motion.END),
                   Action.select_all(), Action.select_word(), Action.click(0, 0)):
        assert not action.is_edit()


def test_insert_requires_single_char():
    with pytest.raises(ValueError):
        Action.insert("ab")


def test_content_text_round_trip():
    text = "first\r\nsecond\nthird"
    assert Content(text).text() == text


def test_line_ending_of_first_line():
    assert Content("a\r\nb\nc").line_ending() == "\r\n"
    assert Content("single").line_ending() is None


def test_typing_builds_text_and_moves_cursor():
    content = Content()
    word = "hello"
    for char in word:
        content.perform(Action.insert(char))
    assert content.text() == word
    assert content.cursor_position() == (0, len(word))


def test_backspace_undoes_insert():
    original = "abc\ndef"
    content = Content(original)
    content.perform(Action.move(Motion.DOCUMENT_END))
    content.perform(Action.insert("z"))
    content.perform(Action.backspace())
    assert content.text() == original


def test_enter_uses_existing_line_ending():
    content = Content("x\r\ny")
    content.perform(Action.move(Motion.DOCUMENT_END))
    content.perform(Action.enter())
    text = content.text()
    assert text.count("\r\n") == 2
    assert text.count("\n") == 2
    assert content.cursor_position()[0] == 2


def test_backspace_at_line_start_joins_lines():
    content = Content("a\r\nb")
    content.perform(Action.click(1, 0))
    content.perform(Action.backspace())
    assert content.text() == "a" + "b"
    assert content.cursor_position() == (0, 1)


def test_delete_at_line_end_joins_lines():
    content = Content("ab\ncd")
    content.perform(Action.move(Motion.END))
    content.perform(Action.delete())
    assert content.text() == "ab" + "cd"


def test_select_all_then_insert_replaces():
    content = Content("old text\nmore")
    content.perform(Action.select_all())
    content.perform(Action.insert("n"))
    assert content.text() == "n"


def test_select_all_then_backspace_empties():
    content = Content("some\nlines")
    content.perform(Action.select_all())
    content.perform(Action.backspace())
    assert content.text() == ""
    assert content.cursor_position() == (0, 0)


def test_select_then_paste_replaces_selection():
    content = Content("hello world")
    content.perform(Action.select(Motion.WORD_RIGHT))
    content.perform(Action.paste("bye"))
    assert content.text() == "bye world"


def test_document_end_cursor_position():
    lines = ["one", "two", "three!"]
    content = Content("\n".join(lines))
    content.perform(Action.move(Motion.DOCUMENT_END))
    assert content.cursor_position() == (len(lines) - 1, len(lines[-1]))


def test_up_clamps_column():
    content = Content("ab\nlonger line")
    content.perform(Action.move(Motion.DOCUMENT_END))
    content.perform(Action.move(Motion.UP))
    assert content.cursor_position() == (0, len("ab"))


def test_click_clamps_to_buffer():
    content = Content("ab\ncd")
    content.perform(Action.click(10, 10))
    assert content.cursor_position() == (1, len("cd"))


def test_editor_ignores_open_while_loading():
    editor = Editor()
    assert editor.is_loading
    assert editor.begin_open() is False


def test_file_opened_loads_content():
    editor = _ready_editor("body text", "doc.md")
    assert editor.file == Path("doc.md")
    assert editor.content.text() == "body text"
    assert editor.is_loading is False
    assert editor.begin_open() is True
    assert editor.begin_open() is False


def test_file_opened_error_keeps_state():
    editor = Editor()
    editor.file_opened(DialogClosed())
    assert editor.file is None
    assert editor.is_loading is False


def test_edits_mark_dirty_moves_do_not():
    editor = _ready_editor("abc")
    editor.perform(Action.move(Motion.RIGHT))
    assert editor.is_dirty is False
    editor.perform(Action.insert("x"))
    assert editor.is_dirty is True


def test_begin_save_appends_line_ending():
    text = "a\nb"
    editor = _ready_editor(text)
    assert editor.begin_save() == text + "\n"
    assert editor.begin_save() is None


def test_begin_save_keeps_trailing_ending():
    text = "a\r\nb\r\n"
    editor = _ready_editor(text)
    assert editor.begin_save() == text


def test_begin_save_single_line_unchanged():
    editor = _ready_editor("single")
    assert editor.begin_save() == "single"


def test_file_saved_success_and_failure():
    editor = _ready_editor("abc")
    editor.perform(Action.insert("x"))
    editor.begin_save()
    editor.file_saved(FileIOError("EACCES"))
    assert editor.is_dirty is True
    assert editor.is_loading is False
    editor.begin_save()
    editor.file_saved(Path("saved.txt"))
    assert editor.is_dirty is False
    assert editor.file == Path("saved.txt")


def test_new_file_ignored_while_loading():
    editor = Editor(file=Path("keep.txt"))
    editor.new_file()
    assert editor.file == Path("keep.txt")


def test_new_file_resets_buffer():
    editor = _ready_editor("content")
    editor.new_file()
    assert editor.file is None
    assert editor.content.text() == ""


def test_command_palette_flow():
    editor = _ready_editor()
    assert editor.modal_message(ModalMessage.CANCEL) is None
    editor.open_command_palette()
    assert editor.modal is Modal.COMMAND_PALETTE
    assert editor.modal_message(ModalMessage.CANCEL) is ModalEvent.CLOSE_MODAL
    assert editor.modal is None


def test_status_path_new_file():
    assert Editor().status_path() == "New file"


def test_status_path_short_and_long():
    short = Path("dir") / "file.txt"
    assert Editor(file=short).status_path() == str(short)
    long_path = Path("d" * 50) / ("f" * 30 + ".txt")
    status = Editor(file=long_path).status_path()
    assert status.startswith("...")
    assert status[3:] == str(long_path)[-40:]


def test_cursor_label_starts_at_one():
    assert Editor().cursor_label() == "1:1"


def test_syntax_extension():
    assert _ready_editor(path="script.py").syntax_extension() == "py"
    assert Editor().syntax_extension() == "rs"
    assert _ready_editor(path="Makefile").syntax_extension() == "rs"


def test_window_theme_follows_highlighter():
    editor = Editor()
    assert editor.window_theme() is WindowTheme.DARK
    editor.select_theme(HighlighterTheme.INSPIRED_GITHUB)
    assert editor.window_theme() is WindowTheme.LIGHT


def test_title():
    assert Editor().title() == "tsu"


def test_load_file_preserves_line_endings(tmp_path):
    target = tmp_path / "crlf.txt"
    target.write_bytes(b"one\r\ntwo\r\n")
    path, contents = load_file(target)
    assert path == target
    assert contents == "one\r\ntwo\r\n"


def test_load_missing_file(tmp_path):
    with pytest.raises(FileIOError) as info:
        load_file(tmp_path / "missing.txt")
    assert info.value.kind == errno.errorcode[errno.ENOENT]


def test_load_invalid_utf8(tmp_path):
    target = tmp_path / "bad.bin"
    target.write_bytes(b"\xff\xfe\xfa")
    with pytest.raises(FileIOError):
        load_file(target)


def test_open_file_dialog_closed():
    with pytest.raises(DialogClosed):
        open_file(lambda: None)


def test_open_file_uses_picker(tmp_path):
    target = tmp_path / "picked.txt"
    target.write_text("picked contents", encoding="utf-8")
    assert open_file(lambda: target) == (target, "picked contents")


def test_save_file_round_trip(tmp_path):
    target = tmp_path / "out.txt"
    contents = "a\r\nb\n"
    assert save_file(target, contents) == target
    assert load_file(target)[1] == contents


def test_save_file_asks_for_path(tmp_path):
    target = tmp_path / "chosen.txt"
    assert save_file(None, "data", lambda: target) == target
    assert target.read_text(encoding="utf-8") == "data"


def test_save_file_dialog_closed():
    with pytest.raises(DialogClosed):
        save_file(None, "data", lambda: None)