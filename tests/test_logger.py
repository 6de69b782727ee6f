import re
from datetime import datetime

import pytest

from tinyweb.logger import (
    LogLevel,
    Logger,
    get_logger,
    log_debug,
    log_error,
    log_info,
    log_warn,
)

LINE_RE = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{6} (.*)$")


def _today_tail():
    return datetime.now().strftime("%Y_%m_%d")


def _lines(path):
    return path.read_text(encoding="utf-8").splitlines()


def test_sync_write_format(tmp_path):
    logger = Logger()
    logger.init(LogLevel.DEBUG, tmp_path, ".log", 0)
    logger.write(LogLevel.INFO, "hello")
    logger.close()
    lines = _lines(tmp_path / f"{_today_tail()}.log")
    assert len(lines) == 1
    match = LINE_RE.match(lines[0])
    assert match is not None
    assert match.group(1) == "[info] : hello"


@pytest.mark.parametrize(
    "level, title",
    [
        (LogLevel.DEBUG, "[debug]: "),
        (LogLevel.INFO, "[info] : "),
        (LogLevel.WARN, "[warn] : "),
        (LogLevel.ERROR, "[error]: "),
        (7, "[info] : "),
    ],
)
def test_level_titles(tmp_path, level, title):
    logger = Logger()
    logger.init(LogLevel.DEBUG, tmp_path, ".log", 0)
    logger.write(level, "msg")
    logger.close()
    (line,) = _lines(tmp_path / f"{_today_tail()}.log")
    assert LINE_RE.match(line).group(1) == title + "msg"


def test_rotation_by_line_count(tmp_path):
    logger = Logger()
    logger.max_lines = 2
    logger.init(LogLevel.DEBUG, tmp_path, ".log", 0)
    for n in range(5):
        logger.write(LogLevel.INFO, str(n))
    logger.close()
    tail = _today_tail()
    assert len(_lines(tmp_path / f"{tail}.log")) == 2
    assert len(_lines(tmp_path / f"{tail}-1.log")) == 2
    last = _lines(tmp_path / f"{tail}-2.log")
    assert [LINE_RE.match(line).group(1) for line in last] == ["[info] : 4"]


def test_missing_directory_is_created(tmp_path):
    target = tmp_path / "nested"
    logger = Logger()
    logger.init(LogLevel.INFO, target, ".log", 0)
    logger.write(LogLevel.WARN, "created")
    logger.close()
    assert (target / f"{_today_tail()}.log").is_file()


def test_open_state_and_level(tmp_path):
    logger = Logger()
    assert logger.is_open() is False
    logger.init(LogLevel.WARN, tmp_path, ".log", 0)
    assert logger.is_open() is True
    assert logger.get_level() == LogLevel.WARN
    logger.set_level(LogLevel.DEBUG)
    assert logger.get_level() == LogLevel.DEBUG
    logger.close()
    assert logger.is_open() is False


def test_write_before_init_raises():
    with pytest.raises(RuntimeError):
        Logger().write(LogLevel.INFO, "nothing")


def test_module_helpers_filter_by_level(tmp_path):
    logger = get_logger()
    logger.init(LogLevel.WARN, tmp_path, ".log", 0)
    try:
        log_debug("dropped %d", 0)
        log_info("dropped %d", 1)
        log_warn("kept %d", 2)
        log_error("failed %s", "here")
    finally:
        logger.close()
    log_error("after close")
    lines = _lines(tmp_path / f"{_today_tail()}.log")
    assert [LINE_RE.match(line).group(1) for line in lines] == [
        "[warn] : kept 2",
        "[error]: failed here",
    ]