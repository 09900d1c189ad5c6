import pytest

from usrtools import style


def test_reset_sequence():
    assert style.reset() == "\x1b[0m"


def test_color_is_escape_sequence():
    seq = style.color("yellow")
    assert seq.startswith("\x1b[")
    assert seq.endswith("m")


def test_background_extends_foreground():
    fg = style.color("black")
    both = style.color("black", "silver")
    assert both.startswith(fg[:-1] + ";")
    assert both.endswith("m")


def test_distinct_colors_differ():
    names = ["black", "red", "lime", "yellow", "blue", "fushia", "aqua", "white"]
    assert len({style.color(n) for n in names}) == len(names)


def test_unknown_color_raises():
    with pytest.raises(ValueError):
        style.color("nope")


def test_unknown_background_raises():
    with pytest.raises(ValueError):
        style.color("black", "nope")


def test_error_goes_to_stderr(capsys):
    style.error("Something failed")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Error:" in captured.err
    assert "Something failed" in captured.err