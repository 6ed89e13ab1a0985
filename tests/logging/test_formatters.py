import logging

from esdump.logging.formatters import DumpFormatter, APICallFormatter, MultiplexFormatter


def _record(name="esdump.test", level=logging.INFO, msg="", args=()):
    return logging.LogRecord(
        name=name,
        level=level,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=args,
        exc_info=None,
    )


def test_dump_formatter_basic_format():
    formatter = DumpFormatter(include_timestamps=False)

    output = formatter.format(_record(msg="hello"))

    assert output == "INFO [esdump.test] hello"


def test_dump_formatter_sanitizes_msg():
    formatter = DumpFormatter(include_timestamps=False)

    output = formatter.format(_record(msg={"password": "secret"}))

    assert "secret" not in output
    assert "***" in output


def test_dump_formatter_sanitizes_args():
    formatter = DumpFormatter(include_timestamps=False)

    output = formatter.format(_record(msg="%s config %s", args=("dump", {"api_key": "abc"})))

    assert "abc" not in output
    assert "***" in output


def test_dump_formatter_without_sanitizing_keeps_values():
    formatter = DumpFormatter(include_timestamps=False, sanitize_sensitive=False)

    output = formatter.format(_record(msg={"password": "secret"}))

    assert "secret" in output


def test_api_call_formatter_basic():
    formatter = APICallFormatter()
    record = _record(name="esdump.api", level=logging.DEBUG)
    record.api_method = "POST"
    record.api_url = "http://localhost:9200/_search"
    record.api_status = 200
    record.api_duration = 0.123
    record.api_index = "logs"

    output = formatter.format(record)

    assert "POST http://localhost:9200/_search -> 200 (123.0ms) index=logs" in output


def test_api_call_formatter_transport_error():
    formatter = APICallFormatter()
    record = _record(name="esdump.api", level=logging.ERROR)
    record.api_method = "POST"
    record.api_url = "https://elastic:changeme@es:9200/logs/_pit"
    record.api_status = None
    record.api_duration = 0
    record.api_error = "connection refused"

    output = formatter.format(record)

    assert "-> ---" in output
    assert "changeme" not in output
    assert output.endswith("    Error: connection refused")


def test_multiplex_formatter_uses_api_formatter():
    formatter = MultiplexFormatter(DumpFormatter(include_timestamps=False), APICallFormatter())
    record = _record(name="esdump.api")
    record.api_method = "DELETE"
    record.api_url = "/_pit"
    record.api_status = 404
    record.api_duration = 0.5

    output = formatter.format(record)

    assert "DELETE /_pit" in output
    assert "404" in output


def test_multiplex_formatter_uses_default_formatter():
    formatter = MultiplexFormatter(DumpFormatter(include_timestamps=False), APICallFormatter())

    output = formatter.format(_record(level=logging.WARNING, msg="warning message"))

    assert "WARNING" in output
    assert "warning message" in output


def test_dump_formatter_masks_inline_credentials():
    formatter = DumpFormatter(include_timestamps=False)

    output = formatter.format(_record(msg="Starting dump from https://elastic:changeme@es:9200"))

    assert output == "INFO [esdump.test] Starting dump from https://elastic:***@es:9200"


def test_api_call_formatter_sizes():
    formatter = APICallFormatter()
    record = _record(name="esdump.api", level=logging.DEBUG)
    record.api_method = "POST"
    record.api_url = "http://localhost:9200/_search"
    record.api_status = 200
    record.api_duration = 0.01
    record.api_request_size = 182
    record.api_response_size = 2048

    output = formatter.format(record)

    assert output.endswith("sent=182B received=2.0KB")
