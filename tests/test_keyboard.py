import pytest

from usrtools import keyboard


@pytest.fixture(autouse=True)
def restore_layout():
    saved = keyboard.current_layout()
    yield
    keyboard.set_layout(saved.value)


def test_set_layout():
    assert keyboard.set_layout("azerty") is keyboard.Layout.AZERTY
    assert keyboard.current_layout() is keyboard.Layout.AZERTY


def test_unknown_layout_keeps_current():
    keyboard.set_layout("dvorak")
    with pytest.raises(ValueError):
        keyboard.set_layout("colemak")
    assert keyboard.current_layout() is keyboard.Layout.DVORAK


def test_main_set():
    assert keyboard.main(["set", "qwerty"]) == 0
    assert keyboard.current_layout() is keyboard.Layout.QWERTY


def test_main_errors(capsys):
    assert keyboard.main([]) == 64
    assert keyboard.main(["set"]) == 1
    assert keyboard.main(["set", "nope"]) == 1
    assert keyboard.main(["foo"]) == 1
    err = capsys.readouterr().err
    assert "Keyboard layout missing" in err
    assert "Unknown keyboard layout" in err
    assert "Invalid command" in err


def test_main_help():
    assert keyboard.main(["help"]) == 0
    assert keyboard.main(["--help"]) == 0