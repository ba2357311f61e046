import json
import logging

import pytest

from healthstats.core.base.exceptions import ConfigurationError
from healthstats.core.config.settings import EngineConfig
from healthstats.core.processing.log_manager import (
    JSONFormatter,
    LogManager,
    PerformanceLogger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_package_logger():
    yield
    logging.getLogger("healthstats").setLevel(logging.NOTSET)


@pytest.fixture
def manager_factory():
    managers = []

    def factory(**kwargs):
        manager = LogManager(**kwargs)
        managers.append(manager)
        return manager

    yield factory
    for manager in managers:
        manager.close()


class TestJSONFormatter:
    def test_fields(self):
        record = logging.LogRecord("healthstats.test", logging.WARNING, __file__, 10,
                                   "value %d", (3,), None)
        record.operation = "correlation_matrix"
        entry = json.loads(JSONFormatter().format(record))
        assert entry["level"] == "WARNING"
        assert entry["message"] == "value 3"
        assert entry["logger"] == "healthstats.test"
        assert entry["operation"] == "correlation_matrix"


class TestPerformanceLogger:
    def test_time_operation_logs_duration(self, caplog):
        perf = PerformanceLogger(logging.getLogger("healthstats.perf-test"))
        with caplog.at_level(logging.DEBUG, logger="healthstats.perf-test"):
            with perf.time_operation("fit"):
                pass
        assert "Operation 'fit' completed" in caplog.text

    def test_unknown_timer_warns(self, caplog):
        perf = PerformanceLogger(logging.getLogger("healthstats.perf-test"))
        with caplog.at_level(logging.WARNING, logger="healthstats.perf-test"):
            assert perf.end_timer("never-started") == 0.0
        assert "not found" in caplog.text

    def test_time_function_decorator(self):
        perf = PerformanceLogger(logging.getLogger("healthstats.perf-test"))

        @perf.time_function("double")
        def double(x):
            return 2 * x

        assert double(4) == 8


class TestLogManager:
    def test_console_handler_on_package_logger(self, manager_factory):
        manager = manager_factory(level="DEBUG")
        package_logger = logging.getLogger("healthstats")
        assert package_logger.level == logging.DEBUG
        assert any(isinstance(h, logging.StreamHandler) for h in package_logger.handlers)
        assert manager.get_status()["handlers"] == 1

    def test_file_handler_writes_json(self, manager_factory, tmp_path):
        log_file = tmp_path / "logs" / "engine.log"
        manager = manager_factory(level="INFO", file_path=log_file, format_type="json",
                                  enable_console=False)
        manager.get_logger("batch").info("matrix built")
        for handler in manager._handlers:
            handler.flush()

        lines = log_file.read_text(encoding="utf-8").strip().splitlines()
        entry = json.loads(lines[-1])
        assert entry["message"] == "matrix built"
        assert entry["logger"] == "healthstats.batch"

    def test_from_config(self, manager_factory, tmp_path):
        config = EngineConfig(log_level="WARNING", log_format="detailed",
                              log_file=tmp_path / "cfg.log")
        manager = manager_factory(config=config, enable_console=False)
        status = manager.get_status()
        assert status["level"] == "WARNING"
        assert status["format_type"] == "detailed"
        assert status["file_path"] == str(tmp_path / "cfg.log")

    def test_set_level(self, manager_factory):
        manager = manager_factory(level="INFO")
        manager.set_level("ERROR")
        assert logging.getLogger("healthstats").level == logging.ERROR

    def test_close_removes_handlers(self, manager_factory):
        manager = manager_factory()
        before = len(logging.getLogger("healthstats").handlers)
        manager.close()
        assert len(logging.getLogger("healthstats").handlers) == before - 1

    def test_rejects_unknown_level_and_format(self):
        with pytest.raises(ConfigurationError):
            LogManager(level="CHATTY", enable_console=False)
        with pytest.raises(ConfigurationError):
            LogManager(format_type="xml", enable_console=False)

    def test_setup_logging_uses_given_config(self):
        manager = setup_logging(EngineConfig(log_level="DEBUG"), enable_console=False)
        try:
            assert manager.level == logging.DEBUG
        finally:
            manager.close()

    def test_context_manager_closes(self, tmp_path):
        log_file = tmp_path / "ctx.log"
        with LogManager(file_path=log_file, enable_console=False) as manager:
            assert len(manager._handlers) == 1
        assert manager._handlers == []
