import json
import logging

import pytest
from prometheus_client import REGISTRY

from supastorage.common.logging import (
    LIBRARY_LOGGER,
    STARTUP_LOGGER,
    JsonFormatter,
    setup_logging,
)
from supastorage.storage.client import StorageClient
from supastorage.storage.errors import TransportError
from tests.storage.mock_transport import MockTransport, make_response, network_error


def _sample(name: str, **labels: str) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_request_counter_uses_operation_label(config):
    client = StorageClient(config, transport=MockTransport())
    before = _sample(
        "storage_client_requests_total", operation="move", method="POST", status="200"
    )

    client.move("a.png", "b.png")

    after = _sample(
        "storage_client_requests_total", operation="move", method="POST", status="200"
    )
    assert after == before + 1
    assert _sample(
        "storage_client_request_duration_seconds_count", operation="move", method="POST"
    ) >= 1


def test_transport_failure_counted_as_error(config):
    transport = MockTransport().queue(network_error())
    client = StorageClient(config, transport=transport)
    before = _sample(
        "storage_client_requests_total", operation="remove", method="DELETE", status="error"
    )

    with pytest.raises(TransportError):
        client.remove(["a.png"])

    after = _sample(
        "storage_client_requests_total", operation="remove", method="DELETE", status="error"
    )
    assert after == before + 1


def test_request_logged_with_structured_payload(config, caplog):
    transport = MockTransport().queue(make_response(json_body=[]))
    client = StorageClient(config, transport=transport)

    with caplog.at_level(logging.INFO, logger="supastorage.http"):
        client.list("folder")

    record = caplog.records[-1]
    assert record.levelno == logging.INFO
    assert record.extra["operation"] == "list"
    assert record.extra["status"] == "200"
    assert record.extra["path"] == "/object/list/test-bucket"
    assert "request_headers" not in record.extra


def test_trace_masks_authorization(config, caplog):
    client = StorageClient(config, transport=MockTransport(), trace_http=True)

    with caplog.at_level(logging.INFO, logger="supastorage.http"):
        client.copy("a.png", "b.png")

    payload = caplog.records[-1].extra
    assert payload["request_headers"]["Authorization"] == "***"
    assert payload["request_body"]["sourceKey"] == "a.png"


def test_json_formatter_merges_extra():
    record = logging.LogRecord(
        name="supastorage.http",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="storage request status=%s",
        args=("404",),
        exc_info=None,
    )
    record.extra = {"status": "404", "operation": "download"}

    payload = json.loads(JsonFormatter().format(record))

    assert payload.pop("time")
    assert payload == {
        "level": "WARNING",
        "logger": "supastorage.http",
        "message": "storage request status=404",
        "status": "404",
        "operation": "download",
    }


@pytest.fixture()
def restore_library_loggers():
    saved = {}
    for name in (LIBRARY_LOGGER, STARTUP_LOGGER):
        logger = logging.getLogger(name)
        saved[name] = (list(logger.handlers), logger.level, logger.propagate)
    yield
    for name, (handlers, level, propagate) in saved.items():
        logger = logging.getLogger(name)
        logger.handlers = handlers
        logger.setLevel(level)
        logger.propagate = propagate


@pytest.mark.parametrize(
    ("json_output", "formatter_type"),
    [(True, JsonFormatter), (False, logging.Formatter)],
)
def test_setup_logging_routes_library_loggers(
    restore_library_loggers, json_output, formatter_type
):
    setup_logging("DEBUG", json_output=json_output)

    library = logging.getLogger(LIBRARY_LOGGER)
    assert library.level == logging.DEBUG
    assert library.propagate is False
    assert type(library.handlers[0].formatter) is formatter_type
    startup = logging.getLogger(STARTUP_LOGGER)
    assert type(startup.handlers[0].formatter) is logging.Formatter
