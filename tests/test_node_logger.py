"""
Tests for NodeLogger
"""

import logging

import pytest
from unittest.mock import patch

from restnodes.context import ExecutionContext
from restnodes.logging.node_logger import NodeLogger
from restnodes.nodes.odoo_rest import OdooRestNode
from restnodes.result import Item


class _Collecting(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def logger_name(request):
    name = f"restnodes.tests.{request.node.name}"
    yield name
    logging.getLogger(name).handlers.clear()


class TestNodeLogger:
    """Tests for NodeLogger."""

    def test_single_handler_without_propagation(self, test_context, logger_name):
        NodeLogger(test_context, name=logger_name)
        log = NodeLogger(test_context, name=logger_name, level="debug")

        assert len(log._logger.handlers) == 1
        assert log._logger.propagate is False
        assert log._logger.level == logging.DEBUG

    def test_configured_root_does_not_repeat_lines(self, test_context, logger_name):
        log = NodeLogger(test_context, name=logger_name)

        root = logging.getLogger()
        collected = _Collecting()
        root.addHandler(collected)
        try:
            log.node_started(data={"items": 1})
        finally:
            root.removeHandler(collected)

        assert collected.records == []

    def test_prefix(self, test_context, logger_name):
        log = NodeLogger(test_context, name=logger_name)

        with patch.object(log._logger, "log") as emit:
            log.item_failed(2, "boom")

        level, message = emit.call_args.args
        assert level == logging.WARNING
        assert message == "[test-req] [test_node] [item=2] FAILED (emitted error item): boom"

    def test_error_appends_detail(self, test_context, logger_name):
        log = NodeLogger(test_context, name=logger_name)

        with patch.object(log._logger, "log") as emit:
            log.error("Batch setup failed", error="denied")

        assert emit.call_args.args[1].endswith("Batch setup failed: denied")


class TestNodeStartedAudit:
    """The start event carries the execution context."""

    def test_node_started_includes_context(self, mock_odoo_rest, mock_logger):
        ctx = ExecutionContext.for_http(
            node_name="odoo_rest",
            user_id="u-7",
            correlation_id="corr-1",
        )

        OdooRestNode(ctx, client=mock_odoo_rest, log=mock_logger).execute(
            [Item(), Item()], {"operation": "get", "id": "1"},
        )

        data = mock_logger.node_started.call_args.kwargs["data"]
        assert data["items"] == 2
        assert data["request_id"] == ctx.request_id
        assert data["triggered_by"] == "http"
        assert data["user_id"] == "u-7"
        assert data["correlation_id"] == "corr-1"
        assert data["continue_on_fail"] is False
