import json

import structlog

from src.teamschedule.logging import get_logger, setup_logging


def test_json_logs_go_to_stderr(capsys) -> None:
    try:
        setup_logging(json_output=True, log_level="WARNING")
        log = get_logger("teamschedule.test")
        log.info("hidden_event")
        log.warning("schedule_self_conflicts", student="张三", conflicts=2)

        captured = capsys.readouterr()
        assert captured.out == ""
        record = json.loads(captured.err.strip().splitlines()[-1])
        assert record["event"] == "schedule_self_conflicts"
        assert record["student"] == "张三"
        assert record["level"] == "warning"
        assert "hidden_event" not in captured.err
    finally:
        structlog.reset_defaults()
