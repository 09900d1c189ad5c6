"""Text buffer with a cursor and a viewport: the editing core of the editor."""

import enum
import re
from dataclasses import dataclass

from usrtools.style import color, reset

_PAIRS = (("(", ")"), ("{", "}"), ("[", "]"))


class Command(enum.Enum):
    """Kinds of line-mode commands that changed something."""

    SAVE = "save"
    REPLACE = "replace"
    DELETE = "delete"


@dataclass
class _Coords:
    x: int = 0
    y: int = 0


def _split_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _compile(pattern: str) -> "re.Pattern[str]":
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"Invalid pattern '{pattern}'") from exc


def _truncated_line_indicator() -> str:
    return f"{color('black', 'silver')}>{reset()}"


class Buffer:
    """Lines of text seen through a screen of rows by cols.

    The cursor is relative to the screen and the offset is the position of
    the screen in the text.
    """

    def __init__(self, pathname: str, lines=None, rows: int = 24, cols: int = 80,
                 tab_size: int = 4):
        self.pathname = pathname
        self.rows = rows
        self.cols = cols
        self.tab_size = tab_size
        self.clipboard: list[str] = []
        self.cursor = _Coords()
        self.offset = _Coords()
        self.message: tuple[str, str] | None = None
        if lines is None:
            lines = self._read(pathname)
        self.lines: list[str] = list(lines) or [""]

    @staticmethod
    def _read(path: str) -> list[str]:
        try:
            with open(path, encoding="utf-8") as f:
                return _split_lines(f.read())
        except (OSError, UnicodeDecodeError):
            return [""]

    @property
    def _x(self) -> int:
        return self.offset.x + self.cursor.x

    @property
    def _y(self) -> int:
        return self.offset.y + self.cursor.y

    def _align_cursor(self) -> None:
        # Bring a cursor past the end of the line back to the end of it
        eol = len(self.lines[self._y])
        if self._x > eol:
            self.offset.x = (eol // self.cols) * self.cols
            self.cursor.x = eol % self.cols

    def _render_char(self, char: str) -> str | None:
        if char == "\t":
            return " " * self.tab_size
        if len(char) == 1 and char.isprintable():
            return char
        return None

    def insert_char(self, char: str) -> bool:
        """Insert a printable character (or a tab as spaces) at the cursor."""
        text = self._render_char(char)
        if text is None:
            return False
        y, x = self._y, self._x
        line = self.lines[y]
        self.lines[y] = line[:x] + text + line[x:]
        self.cursor.x += len(text)
        if self.cursor.x >= self.cols:
            self.offset.x += self.cols
            self.cursor.x -= self.cols
        return True

    def newline(self) -> None:
        """Split the current line at the cursor."""
        y, x = self._y, self._x
        line = self.lines[y]
        self.lines[y] = line[:x]
        self.lines.insert(y + 1, line[x:])
        if self.cursor.y == self.rows - 1:
            self.offset.y += 1
        else:
            self.cursor.y += 1
        self.cursor.x = 0
        self.offset.x = 0

    def backspace(self) -> bool:
        """Remove the character before the cursor, or join with the previous line."""
        y, x = self._y, self._x
        if x > 0:
            line = self.lines[y]
            self.lines[y] = line[:x - 1] + line[x:]
            if self.cursor.x == 0:
                self.offset.x -= self.cols
                self.cursor.x = self.cols - 1
            else:
                self.cursor.x -= 1
            return True
        if self.cursor.y == 0 and self.offset.y == 0:
            return False
        n = len(self.lines[y - 1])
        self.cursor.x = n % self.cols
        self.offset.x = self.cols * (n // self.cols)
        self.lines[y - 1] += self.lines.pop(y)
        if self.cursor.y > 0:
            self.cursor.y -= 1
        else:
            self.offset.y -= 1
        return True

    def delete(self) -> bool:
        """Remove the character under the cursor, or join with the next line."""
        y, x = self._y, self._x
        line = self.lines[y]
        if x >= len(line):
            if y + 1 < len(self.lines):
                self.lines[y] += self.lines.pop(y + 1)
                return True
            return False
        self.lines[y] = line[:x] + line[x + 1:]
        return True

    def move_up(self) -> None:
        """Move the cursor one line up, scrolling if needed."""
        if self.cursor.y > 0:
            self.cursor.y -= 1
        elif self.offset.y > 0:
            self.offset.y -= 1
        self._align_cursor()

    def move_down(self) -> bool:
        """Move the cursor one line down, scrolling if needed."""
        n = len(self.lines) - 1
        is_eof = n == self._y
        is_bottom = self.cursor.y == self.rows - 1
        if self.cursor.y >= min(self.rows, n):
            return False
        if is_bottom or is_eof:
            if not is_eof:
                self.offset.y += 1
        else:
            self.cursor.y += 1
        self._align_cursor()
        return True

    def move_right(self) -> bool:
        """Move the cursor one character right; False at the end of the line."""
        line = self.lines[self._y]
        if not line or self._x >= len(line):
            return False
        if self.cursor.x == self.cols - 1:
            self.offset.x += self.cols
            self.cursor.x -= self.cols - 1
        else:
            self.cursor.x += 1
        return True

    def move_left(self) -> bool:
        """Move the cursor one character left; False at the start of the line."""
        if self._x == 0:
            return False
        if self.cursor.x == 0:
            self.offset.x -= self.cols
            self.cursor.x += self.cols - 1
            self._align_cursor()
        else:
            self.cursor.x -= 1
        return True

    def page_up(self) -> None:
        """Scroll up by one screen, keeping one line on screen."""
        scroll = self.rows - 1
        self.offset.y -= min(scroll, self.offset.y)
        self._align_cursor()

    def page_down(self) -> None:
        """Scroll down by one screen, keeping one line on screen."""
        scroll = self.rows - 1
        n = max(len(self.lines), 1)
        remaining = n - self.offset.y - 1
        self.offset.y += min(scroll, remaining)
        if self.cursor.y + scroll > remaining:
            self.cursor.y = 0
        self._align_cursor()

    def go_top(self) -> None:
        """Move to the beginning of the file."""
        self.cursor = _Coords()
        self.offset = _Coords()

    def go_bottom(self) -> None:
        """Move to the beginning of the last line."""
        self.cursor.x = 0
        self.cursor.y = min(self.rows, len(self.lines)) - 1
        self.offset.x = 0
        self.offset.y = len(self.lines) - 1 - self.cursor.y

    def line_start(self) -> None:
        """Move to the beginning of the current line."""
        self.cursor.x = 0
        self.offset.x = 0

    def line_end(self) -> None:
        """Move to the end of the current line."""
        n = len(self.lines[self._y])
        self.cursor.x = n % self.cols
        self.offset.x = self.cols * (n // self.cols)

    def cut_line(self) -> None:
        """Move the current line to the clipboard."""
        i = self._y
        self.clipboard.append(self.lines.pop(i))
        if not self.lines:
            self.lines.append("")
        if i >= len(self.lines):
            if self.cursor.y > 0:
                self.cursor.y -= 1
            elif self.offset.y > 0:
                self.offset.y -= 1
        self.cursor.x = 0
        self.offset.x = 0

    def copy_line(self) -> None:
        """Copy the current line to the clipboard."""
        self.clipboard.append(self.lines[self._y])

    def paste_line(self) -> None:
        """Insert the last clipboard line below the current line."""
        if self.clipboard:
            self.lines.insert(self._y + 1, self.clipboard.pop())
        self.cursor.x = 0
        self.offset.x = 0

    def find_next(self, query: str) -> bool:
        """Move to the next occurrence of query after the cursor."""
        dx, dy = self._x, self._y
        for y, line in enumerate(self.lines):
            if y < dy:
                continue
            start = min(dx + 1, len(line)) if y == dy else 0
            x = line.find(query, start)
            if x >= 0:
                self.cursor.x = x % self.cols
                self.cursor.y = y % self.rows
                self.offset.x = x - self.cursor.x
                self.offset.y = y - self.cursor.y
                return True
        return False

    def _substitute(self, y: int, regex, replacement: str, everywhere: bool) -> None:
        self.lines[y] = regex.sub(
            lambda _match: replacement, self.lines[y], count=0 if everywhere else 1
        )

    def exec_command(self, command: str) -> Command | None:
        """Run a line-mode command such as 'd', '%s/a/b/g' or 'w path'."""
        sep = " " if command.startswith("w") else "/"
        params = command.split(sep)
        head, count = params[0], len(params)
        result = None
        if head == "d" and count == 1:
            self.lines.pop(self._y)
            result = Command.DELETE
        elif head == "%d" and count == 1:
            self.lines = [""]
            result = Command.DELETE
        elif head == "g" and count == 3:
            regex = _compile(params[1])
            if params[2] == "d":
                self.lines = [line for line in self.lines if not regex.search(line)]
                result = Command.DELETE
        elif head == "s" and count == 4:
            regex = _compile(params[1])
            self._substitute(self._y, regex, params[2], params[3] == "g")
            result = Command.REPLACE
        elif head == "%s" and count == 4:
            regex = _compile(params[1])
            for y in range(len(self.lines)):
                self._substitute(y, regex, params[2], params[3] == "g")
            result = Command.REPLACE
        elif head == "w":
            path = params[1] if count == 2 else self.pathname
            try:
                self.save(path)
            except OSError:
                pass
            result = Command.SAVE

        if result is not None:
            if not self.lines:
                self.lines.append("")
            y = self._y
            n = len(self.lines) - 1
            if y > n:
                self.cursor.y = n % self.rows
                self.offset.y = n - self.cursor.y
                y = n
            n = len(self.lines[y])
            if self._x > n:
                self.cursor.x = n % self.cols
                self.offset.x = n - self.cursor.x
        return result

    def _match_pair(self, opening: str, closing: str) -> list[tuple[int, int, str]]:
        ox, oy = self.offset.x, self.offset.y
        cx, cy = self.cursor.x, self.cursor.y
        line = self.lines[oy + cy]
        if ox + cx >= len(line):
            return []
        under = line[ox + cx]

        def visible(x: int, y: int) -> bool:
            return ox <= x < ox + self.cols and oy <= y < oy + self.rows

        stack: list[tuple[int, int]] = []
        if under == closing:
            for y, text in enumerate(self.lines[:oy + cy + 1]):
                for x, char in enumerate(text):
                    if y == oy + cy and x == ox + cx:
                        found = []
                        if stack:
                            px, py = stack.pop()
                            found.append((cx, cy, closing))
                            if visible(px, py):
                                found.append((px - ox, py - oy, opening))
                        return found
                    if char == opening:
                        stack.append((x, y))
                    if char == closing and stack:
                        stack.pop()
            return []
        if under == opening:
            for y in range(oy + cy, len(self.lines)):
                for x, char in enumerate(self.lines[y]):
                    if y == oy + cy and x <= ox + cx:
                        continue
                    if char == opening:
                        stack.append((x, y))
                    if char == closing:
                        if not stack:
                            found = [(cx, cy, opening)]
                            if visible(x, y):
                                found.append((x - ox, y - oy, closing))
                            return found
                        stack.pop()
        return []

    def match_brackets(self) -> list[tuple[int, int, str]]:
        """Return screen positions (x, y, char) of the bracket under the cursor and its match."""
        found = []
        for opening, closing in _PAIRS:
            found.extend(self._match_pair(opening, closing))
        return found

    def render_line(self, y: int) -> str:
        """Return the screen row of line y, or a blank row past the end."""
        line = self.lines[y] if y < len(self.lines) else ""
        row = line.ljust(self.offset.x)
        n = self.offset.x + self.cols
        if len(row) > n:
            return row[self.offset.x:n - 1] + _truncated_line_indicator()
        return row.ljust(n)[self.offset.x:]

    def save(self, path: str | None = None) -> None:
        """Write the lines to path (the buffer's own by default)."""
        if path is None:
            path = self.pathname
        contents = "\n".join(self.lines) + "\n"
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(contents)
        except OSError as exc:
            text = f"Could not write to '{path}'"
            self.message = (text, "red")
            raise OSError(text) from exc
        self.pathname = path
        self.message = (f"Wrote {len(self.lines)}L to '{path}'", "yellow")