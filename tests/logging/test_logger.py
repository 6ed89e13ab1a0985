import logging

from esdump.logging import (
    setup_logging,
    get_logger,
    log_api_call,
    log_export_event,
    LogConfig,
    LogLevel,
)


def _fake_file_handler(*args, **kwargs):
    handler = logging.NullHandler()
    handler.setLevel(logging.DEBUG)
    return handler


def _patch_handlers(mocker, tmp_path):
    mocker.patch(
        "esdump.logging.logger.get_log_file_path",
        return_value=tmp_path / "esdump.log",
    )
    mocker.patch("esdump.logging.logger._rotating_handler", side_effect=_fake_file_handler)


def test_setup_logging_basic(mocker, tmp_path):
    _patch_handlers(mocker, tmp_path)

    setup_logging(force_reconfigure=True)

    root_logger = logging.getLogger("esdump")
    assert root_logger.handlers
    assert logging.getLogger("esdump.api").propagate is False


def test_console_handler_writes_to_stderr(mocker, tmp_path):
    _patch_handlers(mocker, tmp_path)
    stderr = mocker.patch("esdump.logging.logger.sys.stderr")

    setup_logging(force_reconfigure=True)

    streams = [
        h.stream for h in logging.getLogger("esdump").handlers
        if isinstance(h, logging.StreamHandler)
    ]
    assert stderr in streams


def test_setup_logging_uses_given_level(mocker, tmp_path):
    _patch_handlers(mocker, tmp_path)

    setup_logging(LogConfig(default_level=LogLevel.DEBUG), force_reconfigure=True)

    assert logging.getLogger("esdump").level == logging.DEBUG
    setup_logging(LogConfig(), force_reconfigure=True)


def test_setup_logging_reads_level_from_settings(mocker, tmp_path):
    _patch_handlers(mocker, tmp_path)
    mocker.patch("esdump.logging.logger._user_settings", return_value={"log_level": "error"})

    setup_logging(force_reconfigure=True)

    assert logging.getLogger("esdump").level == logging.ERROR
    setup_logging(LogConfig(), force_reconfigure=True)


def test_get_logger_returns_same_instance(mocker, tmp_path):
    _patch_handlers(mocker, tmp_path)

    setup_logging(force_reconfigure=True)

    logger1 = get_logger("esdump.test")
    logger2 = get_logger("esdump.test")

    assert logger1 is logger2


def test_log_api_call_success(mocker):
    real_logger = logging.getLogger("esdump.api")
    spy = mocker.spy(real_logger, "debug")

    log_api_call("POST", "http://localhost:9200/_search", status_code=200, duration=0.1)

    spy.assert_called_once()


def test_log_api_call_client_error(mocker):
    real_logger = logging.getLogger("esdump.api")
    spy = mocker.spy(real_logger, "warning")

    log_api_call("POST", "http://localhost:9200/gone/_pit", status_code=404, index="gone")

    spy.assert_called_once()
    _, kwargs = spy.call_args
    assert kwargs["extra"]["api_index"] == "gone"


def test_log_api_call_transport_error(mocker):
    real_logger = logging.getLogger("esdump.api")
    spy = mocker.spy(real_logger, "error")

    log_api_call("POST", "http://localhost:9200/_search", error="connection refused")

    spy.assert_called_once()
    _, kwargs = spy.call_args
    assert kwargs["extra"]["api_error"] == "connection refused"
    assert kwargs["extra"]["api_status"] is None


def test_log_api_call_server_error(mocker):
    real_logger = logging.getLogger("esdump.api")
    spy = mocker.spy(real_logger, "error")

    log_api_call("POST", "http://localhost:9200/_search", status_code=503, duration=0.2)

    spy.assert_called_once()


def test_log_export_event_sanitizes_details(mocker):
    real_logger = logging.getLogger("esdump.export")
    spy = mocker.spy(real_logger, "warning")

    log_export_event(
        "snapshot refused",
        level="warning",
        index="logs",
        details={"status": 401, "api_key": "secret"},
    )

    spy.assert_called_once()
    args, kwargs = spy.call_args
    assert args[0].startswith("Export [logs]: snapshot refused")
    assert "secret" not in args[0]
    assert kwargs["extra"]["export_details"]["api_key"] == "***"
    assert kwargs["extra"]["export_details"]["status"] == 401


def test_log_export_event_default_level(mocker):
    real_logger = logging.getLogger("esdump.export")
    spy = mocker.spy(real_logger, "info")

    log_export_event("completed")

    spy.assert_called_once()
    assert spy.call_args[0][0] == "Export: completed"
