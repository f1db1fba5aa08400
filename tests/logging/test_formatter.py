import json
import logging

from opentelemetry.trace import NonRecordingSpan, SpanContext, TraceFlags, use_span

from statsdb.logging.logger import QUERY_LOGGER_NAME, CustomJsonFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="statsdb.client.sqlalchemy_client",
        level=logging.INFO,
        pathname=__file__,
        lineno=20,
        msg="Results fetched in %s ms",
        args=("1.5",),
        exc_info=None,
    )
    record.__dict__.update(extra)
    return record


def test_formatter_emits_json_with_extras():
    payload = json.loads(CustomJsonFormatter().format(_record(row_count=3)))

    assert payload["message"] == "Results fetched in 1.5 ms"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "statsdb.client.sqlalchemy_client"
    assert payload["row_count"] == 3
    assert "trace_id" not in payload


def test_formatter_adds_trace_ids_inside_span():
    span_context = SpanContext(
        trace_id=0x0AF7651916CD43DD8448EB211C80319C,
        span_id=0x00F067AA0BA902B7,
        is_remote=False,
        trace_flags=TraceFlags(TraceFlags.SAMPLED),
    )

    with use_span(NonRecordingSpan(span_context)):
        payload = json.loads(CustomJsonFormatter().format(_record()))

    assert payload["trace_id"] == "0af7651916cd43dd8448eb211c80319c"
    assert payload["span_id"] == "00f067aa0ba902b7"


def test_setup_logging_controls_query_logger():
    query_logger = logging.getLogger(QUERY_LOGGER_NAME)
    root = logging.getLogger()
    previous = query_logger.level
    root_level, root_handlers = root.level, root.handlers[:]
    try:
        setup_logging("WARNING", log_query=True)
        assert query_logger.level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

        setup_logging("INFO", log_query=False)
        assert query_logger.level == logging.WARNING
    finally:
        query_logger.setLevel(previous)
        root.handlers[:] = root_handlers
        root.setLevel(root_level)
