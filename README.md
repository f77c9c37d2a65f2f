# tsu

tsu is a small desktop text editor. It opens one file, highlights its
syntax with Pygments according to the file's extension, and keeps a status
bar with the file path and the cursor's line and column.

## Installing

```
pip install .
```

The window is drawn with Tk (`tkinter`), which ships with most Python
installations. Syntax highlighting uses Pygments.

## Running

```
tsu path/to/file.txt
```

The file argument is required; if it cannot be read, the editor starts
with an empty buffer and logs a warning. `-V` / `--version` prints the
version. Add `-v` once or more to get more log output on standard error:

| Flag   | Log level |
|--------|-----------|
| (none) | warning   |
| `-v`   | info      |
| `-vv`  | debug     |
| `-vvv` | trace     |

## Using the editor

- **New file** clears the buffer and forgets the current path.
- **Open file** asks for a file to open; it is disabled while a file
  operation is running.
- **Save file** is enabled once the buffer has unsaved edits. If the buffer
  has no path yet, you are asked where to save it. When the text contains
  line breaks but does not end with one, its line ending is appended before
  writing. Files are read and written as UTF-8 with their line endings kept.
- The theme picker chooses the highlighting theme (Solarized Dark, Mocha,
  Ocean, Eighties, Inspired GitHub); the window switches between a light
  and a dark look to match it.
- The highlighter is picked from the file's extension; a buffer with no
  extension is highlighted as `rs`.
- The status bar shows the file path, or "New file". Paths longer than 60
  characters are shown as `...` followed by their last 40 characters. The
  cursor is shown as `line:column`, counting from 1.

Keyboard shortcuts inside the text area:

| Keys               | Action                   |
|--------------------|--------------------------|
| Ctrl+S             | Save the file            |
| Ctrl+Shift+P       | Open the command palette |
| Escape             | Leave the text area      |

The command palette opens over a dimmed window; press Escape or click
outside it to close it.

## What it does not do

The command palette is only a panel with its heading: it lists no commands
and runs none. There is no undo, no search and no support for more than one
open file.

## Using it from Python

The editor's state can be driven without a window:

- `tsu.editor.Editor` holds the file path, the `Content` buffer, the theme
  and the loading, dirty and modal state, with methods such as `perform`,
  `new_file`, `begin_open`, `file_opened`, `begin_save`, `file_saved`,
  `open_command_palette`, `modal_message`, `status_path` and `cursor_label`.
- `tsu.editor.Content` is a text buffer with a cursor and selection; it is
  changed by applying `Action` values (`Action.insert`, `Action.paste`,
  `Action.enter`, `Action.backspace`, `Action.delete`, `Action.move`,
  `Action.select`, `Action.click`, and others).
- `load_file(path)`, `open_file(pick_file)` and
  `save_file(path, contents, pick_save_path)` read and write files; the
  pickers are plain callables returning a path or `None`. Failures raise
  `EditorError`, either as `DialogClosed` or as `FileIOError` (whose `kind`
  names the error, such as `ENOENT` or `InvalidData`).
- `tsu.modal.Modal` lists the modals; `Modal.update(ModalMessage.CANCEL)`
  returns `ModalEvent.CLOSE_MODAL`.

## Running the tests

```
pip install .[test]
pytest
```