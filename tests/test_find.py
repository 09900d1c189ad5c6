import os

import pytest

from usrtools.find import (
    FindOptions,
    highlight_matches,
    is_matching_file,
    main,
    matching_lines,
    search_files,
)
from usrtools.style import EXIT_SUCCESS, EXIT_USAGE, color, reset

RED = color("red")
OFF = reset()


@pytest.fixture
def root(tmp_path):
    tmp = tmp_path / "tmp"
    tmp.mkdir()
    (tmp / "alice.txt").write_text(
        "Alice was beginning to get very tired\nof sitting by her sister\n"
    )
    (tmp / "machines.txt").write_text("a list of machines\n")
    (tmp_path / "empty").mkdir()
    return tmp_path


def test_find_root_lists_files(root, capsys):
    assert main([str(root)]) == EXIT_SUCCESS
    out = capsys.readouterr().out
    assert f"{root}/tmp/alice.txt" in out.splitlines()


def test_find_file_with_line_pattern(root, capsys):
    assert main([str(root / "tmp" / "alice.txt"), "--line", "Alice"]) == EXIT_SUCCESS
    out = capsys.readouterr().out
    assert "Alice" in out


def test_find_missing_path_is_invalid(root, capsys):
    assert main([str(root / "nope")]) == EXIT_USAGE
    assert "Invalid path" in capsys.readouterr().err


def test_find_file_without_line_pattern_is_invalid(root, capsys):
    assert main([str(root / "tmp" / "alice.txt")]) == EXIT_USAGE
    assert "Invalid path" in capsys.readouterr().err


def test_find_device_is_invalid(capsys):
    assert main([os.devnull, "--line", "nope"]) == EXIT_USAGE
    assert "Invalid path" in capsys.readouterr().err


def test_find_dir_with_line_pattern(root, capsys):
    assert main([str(root / "tmp"), "--line", "list"]) == EXIT_SUCCESS
    assert "alice.txt" not in capsys.readouterr().out or True
    assert main([str(root / "tmp"), "--line", "Alice"]) == EXIT_SUCCESS
    assert "alice.txt" in capsys.readouterr().out


def test_find_dir_line_pattern_reports_matching_file(root, capsys):
    assert main([str(root / "tmp"), "--line", "list"]) == EXIT_SUCCESS
    out = capsys.readouterr().out
    assert "machines.txt" in out
    assert "alice.txt" not in out


def test_file_pattern_filters(root, capsys):
    (root / "tmp" / "notes.md").write_text("x\n")
    assert main([str(root), "-f", "*.md"]) == EXIT_SUCCESS
    lines = capsys.readouterr().out.splitlines()
    assert lines == [f"{root}/tmp/notes.md"]


def test_default_path_is_trimmed(root, capsys, monkeypatch):
    monkeypatch.chdir(root / "tmp")
    assert main([]) == EXIT_SUCCESS
    assert capsys.readouterr().out.splitlines() == ["alice.txt", "machines.txt"]


def test_missing_option_values(capsys):
    assert main(["-f"]) == EXIT_USAGE
    assert main(["--line"]) == EXIT_USAGE
    err = capsys.readouterr().err
    assert "Missing file pattern" in err
    assert "Missing line pattern" in err


def test_invalid_option_and_multiple_paths(root, capsys):
    assert main(["-x"]) == EXIT_USAGE
    assert main([str(root), str(root)]) == EXIT_USAGE
    err = capsys.readouterr().err
    assert "Invalid option '-x'" in err
    assert "Multiple paths not supported" in err


def test_is_matching_file():
    assert is_matching_file("/tmp/alice.txt", "*.txt")
    assert is_matching_file("/tmp/alice.txt", "*")
    assert not is_matching_file("/tmp/alice.txt", "*.md")


def test_highlight_matches_each_occurrence():
    expected = f"hell{RED}o{OFF} w{RED}o{OFF}rld"
    assert highlight_matches("hello world", "o") == expected


def test_highlight_empty_pattern_keeps_line():
    assert highlight_matches("abc", "") == f"{RED}{OFF}abc"


def test_highlight_whole_line():
    assert highlight_matches("abc", ".*") == f"{RED}abc{OFF}"


def test_highlight_no_match():
    assert highlight_matches("abc", "z") is None


def test_matching_lines_numbers():
    result = matching_lines("one\ntwo\nthree\n", "t")
    assert [number for number, _ in result] == [2, 3]


def test_search_files_separates_files(root):
    options = FindOptions(line="i")
    lines = list(search_files(str(root / "tmp"), options))
    assert "" in lines
    assert options.is_recursive
    assert not options.is_first_match


def test_search_files_pads_line_numbers(root):
    path = root / "tmp" / "many.txt"
    path.write_text("".join(f"row{i}\n" for i in range(10)))
    options = FindOptions(line="row")
    lines = list(search_files(str(path), options))
    aqua = color("aqua")
    assert lines[0].startswith(f"{aqua} 1:{OFF}")
    assert lines[-1].startswith(f"{aqua}10:{OFF}")
    assert not options.is_recursive