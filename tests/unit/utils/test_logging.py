"""Test structured logging setup."""
import json

import pytest
import structlog
from fx_tagger.utils.logging import setup_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestLogging:
    def test_json_output(self, capsys):
        setup_logging("INFO")
        structlog.get_logger("fx_tagger.test").info("scan_pass_complete", tags_created=2)

        line = capsys.readouterr().out.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "scan_pass_complete"
        assert event["tags_created"] == 2
        assert event["level"] == "info"

    def test_level_filters(self, capsys):
        setup_logging("warning")
        structlog.get_logger("fx_tagger.test").info("rate_missing", currency="DKK")
        assert capsys.readouterr().out == ""
