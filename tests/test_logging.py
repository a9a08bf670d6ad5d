import json
import logging
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pinscope.config import Settings
from pinscope.logging_config import FieldsLogger, JSONFormatter, get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJSONFormatter:
    def test_formats_record(self):
        record = logging.LogRecord("pinscope.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        data = json.loads(JSONFormatter().format(record))
        assert data["level"] == "info"
        assert data["logger"] == "pinscope.test"
        assert data["msg"] == "hello world"
        assert data["ts"].endswith("Z")

    def test_includes_fields(self):
        record = logging.LogRecord("pinscope.test", logging.INFO, __file__, 1, "done", (), None)
        record.fields = {"query": "nature", "count": 3}
        data = json.loads(JSONFormatter().format(record))
        assert data["query"] == "nature"
        assert data["count"] == 3


class TestFieldsLogger:
    def test_get_logger_returns_fields_logger(self):
        assert isinstance(get_logger("pinscope.test.structured"), FieldsLogger)

    def test_info_with_attaches_fields(self, caplog):
        logger = get_logger("pinscope.test.fields")
        with caplog.at_level(logging.INFO, logger="pinscope.test.fields"):
            logger.info_with("scraped", query="cats", count=2)
        record = caplog.records[-1]
        assert record.getMessage() == "scraped"
        assert record.fields == {"query": "cats", "count": 2}


class TestSetupLogging:
    def test_level_from_settings(self, restore_root_logger):
        root = setup_logging(Settings(log_level="debug"))
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, logging.Formatter)
        assert not isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_json_file_output(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "pinscope.log"
        root = setup_logging(Settings(log_json=True, log_file=str(log_file)))
        assert len(root.handlers) == 2
        assert all(isinstance(h.formatter, JSONFormatter) for h in root.handlers)

        get_logger("pinscope.test.file").info_with("search done", count=4)
        for handler in root.handlers:
            handler.flush()

        line = log_file.read_text().strip().splitlines()[-1]
        data = json.loads(line)
        assert data["msg"] == "search done"
        assert data["count"] == 4
