import logging
from dataclasses import dataclass

import pytest
from rich.logging import RichHandler

from optbind import CommandLineOptions, option, run_main
from optbind.utils import resolve_log_mode, setup_logging


@dataclass
class TraceOptions(CommandLineOptions):
    level: int = option("level", "l", default=1)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_cli_mode(tmp_path, restore_root_logger):
    log_file = tmp_path / "optbind.log"
    setup_logging(mode="cli", log_filename=str(log_file))
    root = logging.getLogger()
    assert any(isinstance(handler, RichHandler) for handler in root.handlers)
    assert any(isinstance(handler, logging.FileHandler) for handler in root.handlers)
    logging.getLogger("optbind").debug("hello from test")
    for handler in root.handlers:
        handler.flush()
    assert "hello from test" in log_file.read_text()


def test_setup_logging_json_mode_from_env(tmp_path, monkeypatch, restore_root_logger):
    monkeypatch.setenv("OPTBIND_LOG_MODE", "json")
    log_file = tmp_path / "optbind.json.log"
    setup_logging(log_filename=str(log_file), json_log_to_file=True)
    logging.getLogger("optbind").info("structured")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert '"message": "structured"' in log_file.read_text()


def test_setup_logging_invalid_mode(tmp_path, restore_root_logger):
    with pytest.raises(ValueError):
        setup_logging(mode="xml", log_filename=str(tmp_path / "x.log"))


def test_resolve_log_mode(monkeypatch):
    monkeypatch.delenv("OPTBIND_LOG_MODE", raising=False)
    assert resolve_log_mode("json") == "json"
    monkeypatch.setenv("OPTBIND_LOG_MODE", "cli")
    assert resolve_log_mode() == "cli"
    with pytest.raises(ValueError):
        resolve_log_mode("xml")


def test_run_main_traces_parsing_to_log_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "trace.log"
    received = []
    exit_code = run_main(
        TraceOptions,
        received.append,
        ["-l", "4"],
        log_mode="cli",
        log_filename=str(log_file),
    )
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert exit_code == 0
    assert received[0].level == 4
    assert "Parsing 2 arguments into TraceOptions" in log_file.read_text()
