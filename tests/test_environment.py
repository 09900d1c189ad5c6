from usrtools import environment


def test_format_env_aligned_and_sorted():
    assert environment.format_env({"B": "2", "AA": "1"}) == ['AA "1"', 'B  "2"']


def test_format_env_empty():
    assert environment.format_env({}) == []


def test_main_lists(capsys):
    env = {"HOME": "/usr/alice", "DIR": "/tmp"}
    assert environment.main([], env) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == environment.format_env(env)


def test_main_get(capsys):
    env = {"KEY": "value"}
    assert environment.main(["KEY"], env) == 0
    assert capsys.readouterr().out.strip() == "value"


def test_main_get_missing(capsys):
    assert environment.main(["NOPE"], {}) == 1
    assert "Could not get 'NOPE'" in capsys.readouterr().err


def test_main_set():
    env = {}
    assert environment.main(["K", "V"], env) == 0
    assert env == {"K": "V"}


def test_main_usage():
    env = {"A": "1"}
    assert environment.main(["a", "b", "c"], env) == 64
    assert environment.main(["A", "-h"], env) == 0
    assert env == {"A": "1"}