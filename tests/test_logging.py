import logging

from trello_mcp.core.logging import LogfmtFormatter, resolve_level, setup_logging
from trello_mcp.core.observability import log_event


def _record(msg, **extra):
    record = logging.LogRecord(
        "trello_mcp.client", logging.INFO, __file__, 1, msg, None, None
    )
    for k, v in extra.items():
        setattr(record, k, v)
    return record


def test_logfmt_includes_known_extras_and_quotes_spaces():
    line = LogfmtFormatter().format(
        _record("trello_call", method="GET", path="/boards/b1", status=200, attempt=0)
    )

    assert line.startswith("level=info logger=trello_mcp.client event=trello_call")
    assert "method=GET" in line
    assert "path=/boards/b1" in line
    assert "status=200" in line
    assert "attempt=0" in line

    quoted = LogfmtFormatter().format(_record("Failed to start: bad value"))
    assert 'event="Failed to start: bad value"' in quoted


def test_logfmt_skips_unset_fields():
    line = LogfmtFormatter().format(_record("tool.failed", tool="get_card"))
    assert "tool=get_card" in line
    assert "status=" not in line


def test_resolve_level_accepts_warn():
    assert resolve_level("warn") == logging.WARNING
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level("ERROR") == logging.ERROR


def test_setup_logging_replaces_root_handlers():
    root = logging.getLogger()
    saved = (list(root.handlers), root.level)
    try:
        setup_logging("debug")
        setup_logging("error")
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, LogfmtFormatter)
        assert root.level == logging.ERROR
    finally:
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])


def test_log_event_drops_reserved_keys(caplog):
    caplog.set_level(logging.INFO, logger="trello_mcp.observability")

    log_event("trello_call", tool="get_board", status=200, msg="ignored")

    rec = caplog.records[-1]
    assert rec.getMessage() == "trello_call"
    assert rec.tool == "get_board"
    assert rec.status == 200
