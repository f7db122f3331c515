from coach.logger import DebugLogger, Timer, mask_secret


def test_mask_secret() -> None:
    assert mask_secret("") == "<empty>"
    assert mask_secret("short") == "***"
    assert mask_secret("sk-abcdefghijklmnop1234") == "sk-abcde...1234"


def test_multiline_messages_are_indented(capsys) -> None:
    DebugLogger().api_error("first line\nsecond line")
    out = capsys.readouterr().out.splitlines()
    assert "[  API]" in out[0]
    assert out[0].endswith("first line")
    assert out[1].endswith("second line")


def test_disabled_logger_is_silent(capsys) -> None:
    DebugLogger(enabled=False).warning("nothing to see")
    assert capsys.readouterr().out == ""


def test_timer_measures() -> None:
    with Timer() as timer:
        sum(range(1000))
    assert timer.duration_ms >= 0
