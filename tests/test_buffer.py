import pytest

from usrtools.buffer import Buffer, Command
from usrtools.style import reset


def buf(lines, rows=5, cols=10):
    return Buffer("unused.txt", lines=lines, rows=rows, cols=cols)


def pos(b):
    return (b.offset.x + b.cursor.x, b.offset.y + b.cursor.y)


def test_reads_file(tmp_path):
    path = tmp_path / "a.txt"
    path.write_text("x\ny\n")
    assert Buffer(str(path)).lines == ["x", "y"]


def test_missing_and_empty_files(tmp_path):
    empty = tmp_path / "empty.txt"
    empty.write_text("")
    assert Buffer(str(empty)).lines == [""]
    assert Buffer(str(tmp_path / "missing.txt")).lines == [""]


def test_insert_char():
    b = buf(["bc"])
    assert b.insert_char("a")
    assert b.lines == ["a" + "bc"]
    assert pos(b) == (1, 0)


def test_insert_tab_as_spaces():
    b = buf([""])
    b.insert_char("\t")
    assert b.lines == [" " * b.tab_size]
    assert b.cursor.x == b.tab_size


def test_control_char_is_not_inserted():
    b = buf(["ab"])
    assert not b.insert_char("\x01")
    assert b.lines == ["ab"]


def test_insert_scrolls_horizontally():
    b = buf([""], cols=3)
    for char in "abc":
        b.insert_char(char)
    assert b.offset.x == 3
    assert b.cursor.x == 0
    assert b.lines == ["abc"]


def test_newline_splits_line():
    b = buf(["abcd"])
    b.move_right()
    b.move_right()
    b.newline()
    assert b.lines == ["ab", "cd"]
    assert pos(b) == (0, 1)


def test_backspace_removes_char_and_joins_lines():
    b = buf(["ab", "cd"])
    assert not b.backspace()
    b.move_down()
    assert b.backspace()
    assert b.lines == ["ab" + "cd"]
    assert pos(b) == (len("ab"), 0)
    b.backspace()
    assert b.lines == ["a" + "cd"]


def test_delete_char_and_join():
    b = buf(["ab", "cd"])
    assert b.delete()
    assert b.lines == ["b", "cd"]
    b.line_end()
    assert b.delete()
    assert b.lines == ["b" + "cd"]
    b.line_end()
    assert not b.delete()


def test_move_right_and_left_bounds():
    b = buf(["abcdef"], cols=4)
    assert not b.move_left()
    for _ in range(3):
        b.move_right()
    assert b.cursor.x == 3
    b.move_right()
    assert (b.offset.x, b.cursor.x) == (4, 0)
    b.move_right()
    b.move_right()
    assert not b.move_right()
    while b.move_left():
        pass
    assert pos(b) == (0, 0)


def test_move_down_aligns_to_shorter_line():
    b = buf(["long line", "ab"])
    b.line_end()
    assert b.move_down()
    assert pos(b) == (len("ab"), 1)
    assert not b.move_down()
    b.move_up()
    assert pos(b)[1] == 0


def test_move_down_scrolls():
    b = buf([str(i) for i in range(10)], rows=3)
    for _ in range(5):
        b.move_down()
    assert pos(b) == (0, 5)
    assert b.cursor.y < b.rows


def test_page_down_and_up():
    b = buf([str(i) for i in range(20)], rows=5)
    b.page_down()
    assert b.offset.y == b.rows - 1
    assert pos(b)[1] < len(b.lines)
    b.page_up()
    assert b.offset.y == 0


def test_go_top_and_bottom():
    b = buf([str(i) for i in range(10)], rows=3)
    b.go_bottom()
    assert pos(b) == (0, 9)
    assert b.cursor.y == b.rows - 1
    b.go_top()
    assert pos(b) == (0, 0)


def test_line_start_and_end():
    line = "abcdefghijklmno"
    b = buf([line], cols=4)
    b.line_end()
    assert pos(b)[0] == len(line)
    assert b.cursor.x < b.cols
    b.line_start()
    assert pos(b) == (0, 0)


def test_cut_and_paste_round_trip():
    b = buf(["a", "b", "c"])
    b.move_down()
    b.cut_line()
    assert b.lines == ["a", "c"]
    b.move_up()
    b.paste_line()
    assert b.lines == ["a", "b", "c"]
    assert b.clipboard == []


def test_cut_last_line_keeps_one():
    b = buf(["only"])
    b.cut_line()
    assert b.lines == [""]
    assert b.clipboard == ["only"]


def test_copy_line_duplicates():
    b = buf(["x", "y"])
    b.copy_line()
    b.paste_line()
    assert b.lines == ["x", "x", "y"]


def test_find_next():
    text = "foo bar foo"
    b = buf([text, "foo"], cols=40)
    assert b.find_next("foo")
    assert pos(b) == (text.index("foo", 1), 0)
    assert b.find_next("foo")
    assert pos(b) == (0, 1)
    assert not b.find_next("foo")
    assert not b.find_next("zzz")


def test_exec_substitute():
    b = buf(["aaa", "aba"])
    assert b.exec_command("s/a/x/") is Command.REPLACE
    assert b.lines[0] == "x" + "aa"
    assert b.exec_command("%s/a/y/g") is Command.REPLACE
    assert all("a" not in line for line in b.lines)


def test_exec_global_delete():
    b = buf(["foo", "bar", "food"])
    assert b.exec_command("g/foo/d") is Command.DELETE
    assert b.lines == ["bar"]


def test_exec_delete_last_line_moves_cursor():
    b = buf(["a", "b"])
    b.move_down()
    assert b.exec_command("d") is Command.DELETE
    assert b.lines == ["a"]
    assert pos(b) == (0, 0)


def test_exec_delete_all():
    b = buf(["a", "b"])
    assert b.exec_command("%d") is Command.DELETE
    assert b.lines == [""]


def test_exec_unknown_and_invalid():
    b = buf(["a"])
    assert b.exec_command("nope") is None
    assert b.exec_command("") is None
    with pytest.raises(ValueError):
        b.exec_command("s/(/x/")


def test_exec_write(tmp_path):
    path = tmp_path / "out.txt"
    b = buf(["a", "b"])
    assert b.exec_command(f"w {path}") is Command.SAVE
    assert path.read_text() == "a\nb\n"
    assert b.pathname == str(path)


def test_save_and_failure(tmp_path):
    path = tmp_path / "f.txt"
    b = buf(["one"])
    b.save(str(path))
    assert path.read_text() == "one\n"
    assert b.message == (f"Wrote 1L to '{path}'", "yellow")
    bad = str(tmp_path / "no" / "f.txt")
    with pytest.raises(OSError):
        b.save(bad)
    assert b.message == (f"Could not write to '{bad}'", "red")


def test_match_brackets():
    b = buf(["(a)"])
    assert b.match_brackets() == [(0, 0, "("), (2, 0, ")")]
    b.move_right()
    assert b.match_brackets() == []
    b.move_right()
    assert b.match_brackets() == [(2, 0, ")"), (0, 0, "(")]


def test_match_brackets_nested_across_lines():
    b = buf(["{ [", "] }"])
    assert b.match_brackets() == [(0, 0, "{"), (2, 1, "}")]


def test_render_line():
    b = buf(["ab"], cols=5)
    assert b.render_line(0) == "ab" + " " * 3
    assert b.render_line(7) == " " * 5


def test_render_long_line():
    b = buf(["abcdefgh"], cols=5)
    row = b.render_line(0)
    assert row.startswith("abcd")
    assert row.endswith(">" + reset())