"""Full-screen terminal text editor built on the editing buffer."""

import contextlib
import enum
import os
import shutil
import sys
from collections.abc import Callable

from usrtools.buffer import Buffer, Command
from usrtools.style import EXIT_FAILURE, EXIT_SUCCESS, EXIT_USAGE, color, error, reset

try:
    import termios
    import tty
except ImportError:  # pragma: no cover - platforms without termios
    termios = None
    tty = None

_HISTORY_FILE = "~/.edit-history"
_MAX_PATH = 50

_CLEAR_SCREEN = "\x1b[2J\x1b[1;1H"
_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_LINE = "\x1b[2K\x1b[1G"


class _Step(enum.Enum):
    SKIP = "skip"  # nothing more to do for this key
    SHOW = "show"  # enable the cursor only
    RESET = "reset"  # enable the cursor and end the escape sequence
    FINISH = "finish"  # redraw the status line and end the escape sequence


@contextlib.contextmanager
def _raw_terminal(stream):
    """Put a terminal stream in raw input mode while keeping output processing."""
    if termios is None or not hasattr(stream, "isatty") or not stream.isatty():
        yield
        return
    fd = stream.fileno()
    saved = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        attrs = termios.tcgetattr(fd)
        attrs[1] |= termios.OPOST | termios.ONLCR
        termios.tcsetattr(fd, termios.TCSADRAIN, attrs)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


def _load_history(path: str) -> list[str]:
    try:
        with open(path, encoding="utf-8") as f:
            return [line for line in f.read().split("\n") if line]
    except (OSError, UnicodeDecodeError):
        return []


class Editor:
    """An interactive editor drawing a buffer on a terminal."""

    def __init__(
        self,
        pathname: str,
        rows: int | None = None,
        cols: int | None = None,
        stdin=None,
        out=None,
        prompt: Callable[[str], str | None] | None = None,
        history_path: str | None = None,
    ):
        if rows is None or cols is None:
            size = shutil.get_terminal_size()
            rows = size.lines - 1 if rows is None else rows
            cols = size.columns if cols is None else cols
        self.buffer = Buffer(pathname, rows=rows, cols=cols)
        self.stdin = stdin if stdin is not None else sys.stdin
        self.out = out if out is not None else sys.stdout
        self._prompt = prompt if prompt is not None else self._read_line
        if history_path is None:
            history_path = os.path.expanduser(_HISTORY_FILE)
        self.history_path = history_path
        self.command_history = _load_history(history_path)
        self.search_history: list[str] = []
        self.search_query = ""
        self.highlighted: list[tuple[int, int, str]] = []
        self._escape = False
        self._csi = False
        self._csi_params = ""

    # Output helpers

    def _write(self, text: str) -> None:
        self.out.write(text)

    def _move_cursor(self) -> None:
        cursor = self.buffer.cursor
        self._write(f"\x1b[{cursor.y + 1};{cursor.x + 1}H")

    def _print_status(self, status: str, background: str) -> None:
        buf = self.buffer
        self._write(f"\x1b[{buf.rows + 1};1H")
        self._write(f"{color('black', background)}{status:<{buf.cols}}{reset()}")
        self._move_cursor()

    def _print_editing_status(self) -> None:
        buf = self.buffer
        path = buf.pathname
        if len(path) > _MAX_PATH:
            path = path[:_MAX_PATH - 3] + "..."
        start = f"Editing '{path}'"
        x = buf.offset.x + buf.cursor.x + 1
        y = buf.offset.y + buf.cursor.y + 1
        percent = y * 100 // len(buf.lines)
        end = f"{y},{x} {percent:3}%"
        width = max(buf.cols - len(start), 0)
        self._print_status(f"{start}{end:>{width}}", "silver")

    def _print_screen(self) -> None:
        buf = self.buffer
        rows = (buf.render_line(y) for y in range(buf.offset.y, buf.offset.y + buf.rows))
        self._write("\x1b[1;1H" + "\n".join(rows) + "\n")

    def _print_current_line(self) -> None:
        buf = self.buffer
        self._write(_CLEAR_LINE + buf.render_line(buf.offset.y + buf.cursor.y))

    def _print_highlighted(self) -> None:
        self.highlighted = self.buffer.match_brackets()
        red, off = color("red"), reset()
        for x, y, char in self.highlighted:
            if x == self.buffer.cols - 1:
                continue
            self._write(f"\x1b[{y + 1};{x + 1}H{red}{char}{off}")

    def _clear_highlighted(self) -> None:
        off = reset()
        for x, y, char in self.highlighted:
            if x == self.buffer.cols - 1:
                continue
            self._write(f"\x1b[{y + 1};{x + 1}H{off}{char}")
        self.highlighted = []

    # Input helpers

    def _read_char(self) -> str:
        char = self.stdin.read(1)
        return "\n" if char == "\r" else char

    def _read_line(self, label: str) -> str | None:
        """Read a line at the bottom of the screen; None when cancelled."""
        self._write(label)
        self.out.flush()
        chars: list[str] = []
        while True:
            char = self._read_char()
            if char in ("", "\x1b", "\x03"):
                return None
            if char == "\n":
                return "".join(chars)
            if char in ("\x08", "\x7f"):
                if chars:
                    chars.pop()
                    self._write("\x08 \x08")
            elif char.isprintable():
                chars.append(char)
                self._write(char)
            self.out.flush()

    def _prompt_input(self, label: str) -> str | None:
        buf = self.buffer
        self._write(f"\x1b[{buf.rows + 1};1H")
        self._write(f"{color('black', 'silver')}{' ' * buf.cols}")
        self._write(f"\x1b[{buf.rows + 1};1H")
        self._write(_SHOW_CURSOR)
        result = self._prompt(label)
        self._write(reset())
        return result

    # Commands

    def _save(self, path: str | None = None) -> bool:
        try:
            self.buffer.save(path)
            ok = True
        except OSError:
            ok = False
        if self.buffer.message is not None:
            self._print_status(*self.buffer.message)
        return ok

    def _add_history(self, command: str) -> None:
        if not self.command_history or self.command_history[-1] != command:
            self.command_history.append(command)
        try:
            with open(self.history_path, "w", encoding="utf-8") as f:
                f.write("".join(f"{line}\n" for line in self.command_history))
        except OSError:
            pass

    def _exec_command(self, command: str) -> Command | None:
        try:
            result = self.buffer.exec_command(command)
        except ValueError as exc:
            self._print_status(str(exc), "red")
            return None
        if result is Command.SAVE and self.buffer.message is not None:
            self._print_status(*self.buffer.message)
        if result is not None:
            self._add_history(command)
        return result

    def _exec(self) -> Command | None:
        command = self._prompt_input(":")
        if command is None:
            return None
        # The prompt enabled the cursor; keep it hidden until the key is handled.
        self._write(_HIDE_CURSOR)
        return self._exec_command(command)

    def _find(self) -> None:
        query = self._prompt_input("Find: ")
        if query:
            self.search_history.append(query)
            self.search_query = query
            self.buffer.find_next(query)

    # Key handling

    def handle_key(self, key: str) -> int | None:
        """Handle one key; return an exit code when the editor should stop."""
        self._write(_HIDE_CURSOR)
        self._clear_highlighted()
        self._move_cursor()
        step = self._dispatch(key)
        if isinstance(step, int):
            return step
        if step is _Step.FINISH:
            self._print_editing_status()
            self._print_highlighted()
            self._move_cursor()
        if step is not _Step.SKIP:
            self._write(_SHOW_CURSOR)
        if step in (_Step.FINISH, _Step.RESET):
            self._escape = False
            self._csi = False
        return None

    def _dispatch(self, key: str):
        buf = self.buffer
        csi = self._csi
        if key == "\x1b":
            self._escape = True
            return _Step.SKIP
        if key == "[" and self._escape:
            self._csi = True
            self._csi_params = ""
            return _Step.SKIP
        if key == "\0":
            return _Step.SKIP
        if key in ("\x11", "\x03"):  # Ctrl Q or Ctrl C
            self._write(_CLEAR_SCREEN + _SHOW_CURSOR)
            return EXIT_SUCCESS
        if key == "\x17":  # Ctrl W
            self._save(buf.pathname)
            return _Step.SHOW
        if key == "\x18":  # Ctrl X
            ok = self._save(buf.pathname)
            self._write(_CLEAR_SCREEN + _SHOW_CURSOR)
            return EXIT_SUCCESS if ok else EXIT_FAILURE
        if key == "\n":
            buf.newline()
            self._print_screen()
            return _Step.FINISH
        if key == "~" and csi and self._csi_params == "5":  # Page Up
            buf.page_up()
            self._print_screen()
            return _Step.FINISH
        if key == "~" and csi and self._csi_params == "6":  # Page Down
            buf.page_down()
            self._print_screen()
            return _Step.FINISH
        if key == "A" and csi:
            buf.move_up()
            self._print_screen()
            return _Step.FINISH
        if key == "B" and csi:
            if buf.move_down():
                self._print_screen()
            return _Step.FINISH
        if key in ("C", "D") and csi:
            before = buf.offset.x
            moved = buf.move_right() if key == "C" else buf.move_left()
            if not moved:
                return _Step.RESET
            if buf.offset.x != before:
                self._print_screen()
            return _Step.FINISH
        if key == "Z" and csi:  # Shift Tab
            return _Step.FINISH
        moves = {
            "\x14": buf.go_top,
            "\x02": buf.go_bottom,
            "\x01": buf.line_start,
            "\x05": buf.line_end,
            "\x04": buf.cut_line,
            "\x10": buf.paste_line,
        }
        if key in moves:
            moves[key]()
            self._print_screen()
            return _Step.FINISH
        if key == "\x19":  # Ctrl Y
            buf.copy_line()
            return _Step.FINISH
        if key == "\x06":  # Ctrl F
            self._find()
            self._print_screen()
            return _Step.FINISH
        if key == "\x0e":  # Ctrl N
            buf.find_next(self.search_query)
            self._print_screen()
            return _Step.FINISH
        if key == "\x0c":  # Ctrl L
            result = self._exec()
            if result is Command.SAVE:
                return _Step.SHOW
            if result is not None:
                self._print_screen()
            return _Step.FINISH
        if key == "\x08":  # Backspace
            was_inside = buf.offset.x + buf.cursor.x > 0
            was_left = buf.cursor.x == 0
            if not buf.backspace():
                return _Step.RESET
            if was_inside and not was_left:
                self._print_current_line()
            else:
                self._print_screen()
            return _Step.FINISH
        if key == "\x7f":  # Delete
            y = buf.offset.y + buf.cursor.y
            at_end = buf.offset.x + buf.cursor.x >= len(buf.lines[y])
            changed = buf.delete()
            if at_end:
                if changed:
                    self._print_screen()
            else:
                self._print_current_line()
            return _Step.FINISH
        if csi:
            self._csi_params += key
            return _Step.SKIP
        before = buf.offset.x
        if buf.insert_char(key):
            if buf.offset.x != before:
                self._print_screen()
            else:
                self._print_current_line()
        return _Step.FINISH

    def run(self) -> int:
        """Edit until the user quits; return the exit code."""
        with _raw_terminal(self.stdin):
            self._write(_CLEAR_SCREEN)
            self._print_screen()
            self._print_editing_status()
            self._print_highlighted()
            self._write("\x1b[1;1H")
            self.out.flush()
            while True:
                try:
                    key = self._read_char()
                except KeyboardInterrupt:
                    key = "\x03"
                if key == "":
                    key = "\x11"
                result = self.handle_key(key)
                self.out.flush()
                if result is not None:
                    return result


def _help() -> None:
    option, title, off = color("aqua"), color("yellow"), reset()
    print(f"{title}Usage:{off} edit {option}<options> <file>{off}")
    print()
    print(f"{title}Options:{off}")
    print(f"  {option}-c{off}, {option}--command <cmd>{off}    Execute command")


def main(argv=None) -> int:
    """Edit a file, or run one command on it, and return the exit code."""
    args = sys.argv[1:] if argv is None else list(argv)
    path = ""
    command = ""
    arguments = iter(args)
    for arg in arguments:
        if arg in ("-h", "--help"):
            _help()
            return EXIT_SUCCESS
        if arg in ("-c", "--command"):
            value = next(arguments, None)
            if value is None:
                error("Missing command")
                return EXIT_USAGE
            command = value
        elif arg.startswith("-"):
            error(f"Invalid option '{arg}'")
            return EXIT_USAGE
        elif not path:
            path = arg
        else:
            error("Too many arguments")
            return EXIT_USAGE
    if not path:
        _help()
        return EXIT_USAGE

    editor = Editor(path)
    if command:
        try:
            editor.buffer.exec_command(command)
        except ValueError as exc:
            error(str(exc))
            return EXIT_FAILURE
        editor._add_history(command)
        for line in editor.buffer.lines:
            print(line)
        return EXIT_SUCCESS
    return editor.run()