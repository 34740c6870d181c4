"""
Tests for the Ocilion node
"""

import pytest
from unittest.mock import call

from restnodes.errors import ApiRequestError, AuthenticationError, MalformedBodyError, ParameterError
from restnodes.nodes.ocilion import DEFAULT_FILTER, DEFAULT_WORLD_ID, OcilionNode
from restnodes.result import Item, ResultStatus

WORLD = "w-1"
COOKIE = "ocilion_session=abc123"


def make_node(ctx, client, log):
    return OcilionNode(ctx, client=client, log=log)


class TestOcilionRequests:
    """Request building per operation."""

    def test_get(self, mock_ocilion, test_context, mock_logger):
        mock_ocilion.request.return_value = {"id": "c-1", "name": "Alpha"}

        node = make_node(test_context, mock_ocilion, mock_logger)
        result = node.execute(
            [Item()],
            {"resource": "customers", "operation": "get", "worldId": WORLD, "id": "c-1"},
        )

        mock_ocilion.request.assert_called_once_with(
            "GET", f"{WORLD}/customers/c-1", body=None, query={}, cookie=COOKIE,
        )
        assert [i.json for i in result.items] == [{"id": "c-1", "name": "Alpha"}]
        assert result.status == ResultStatus.SUCCESS

    def test_get_defaults(self, mock_ocilion, test_context, mock_logger):
        node = make_node(test_context, mock_ocilion, mock_logger)
        node.execute([Item()], {"id": "d-9", "resource": "devices"})

        method, endpoint = mock_ocilion.request.call_args.args
        assert method == "GET"
        assert endpoint == f"{DEFAULT_WORLD_ID}/devices/d-9"

    def test_get_all_split(self, mock_ocilion, test_context, mock_logger):
        mock_ocilion.request.return_value = {"data": [{"id": 1}, {"id": 2}, {"id": 3}], "total": 3}

        node = make_node(test_context, mock_ocilion, mock_logger)
        result = node.execute(
            [Item()],
            {"operation": "getAll", "worldId": WORLD, "filter": '[{"property":"name","value":"A","op":"="}]'},
        )

        mock_ocilion.request.assert_called_once_with(
            "GET",
            f"{WORLD}/customers",
            body=None,
            query={"filter": '[{"property":"name","value":"A","op":"="}]'},
            cookie=COOKIE,
        )
        assert [i.json for i in result.items] == [{"id": 1}, {"id": 2}, {"id": 3}]

    def test_get_all_without_split(self, mock_ocilion, test_context, mock_logger):
        payload = {"data": [{"id": 1}, {"id": 2}], "total": 2}
        mock_ocilion.request.return_value = payload

        node = make_node(test_context, mock_ocilion, mock_logger)
        result = node.execute([Item()], {"operation": "getAll", "split": False})

        assert len(result.items) == 1
        assert result.items[0].json == payload
        assert mock_ocilion.request.call_args.kwargs["query"] == {"filter": DEFAULT_FILTER}

    def test_get_all_empty_filter_sends_no_query(self, mock_ocilion, test_context, mock_logger):
        node = make_node(test_context, mock_ocilion, mock_logger)
        node.execute([Item()], {"operation": "getAll", "filter": ""})

        assert mock_ocilion.request.call_args.kwargs["query"] == {}

    def test_create_with_id(self, mock_ocilion, test_context, mock_logger):
        node = make_node(test_context, mock_ocilion, mock_logger)
        node.execute(
            [Item()],
            {"operation": "create", "worldId": WORLD, "id": "c-7", "body": '{"name": "New"}'},
        )

        mock_ocilion.request.assert_called_once_with(
            "POST", f"{WORLD}/customers/c-7", body={"name": "New"}, query={}, cookie=COOKIE,
        )

    def test_create_without_id(self, mock_ocilion, test_context, mock_logger):
        node = make_node(test_context, mock_ocilion, mock_logger)
        node.execute([Item()], {"operation": "create", "worldId": WORLD, "body": ""})

        mock_ocilion.request.assert_called_once_with(
            "POST", f"{WORLD}/customers", body={}, query={}, cookie=COOKIE,
        )

    def test_update(self, mock_ocilion, test_context, mock_logger):
        node = make_node(test_context, mock_ocilion, mock_logger)
        node.execute(
            [Item()],
            {"operation": "update", "worldId": WORLD, "id": "c-1", "body": '{"active": false}'},
        )

        mock_ocilion.request.assert_called_once_with(
            "PUT", f"{WORLD}/customers/c-1", body={"active": False}, query={}, cookie=COOKIE,
        )

    def test_update_with_array_body(self, mock_ocilion, test_context, mock_logger):
        node = make_node(test_context, mock_ocilion, mock_logger)
        node.execute([Item()], {"operation": "update", "worldId": WORLD, "id": "c-1", "body": "[]"})

        assert mock_ocilion.request.call_args.kwargs["body"] == []

    def test_subresource_does_not_change_endpoint(self, mock_ocilion, test_context, mock_logger):
        node = make_node(test_context, mock_ocilion, mock_logger)
        node.execute(
            [Item()],
            {"operation": "get", "worldId": WORLD, "id": "c-1", "subresource": "billing", "subid": "b-1"},
        )

        assert mock_ocilion.request.call_args.args[1] == f"{WORLD}/customers/c-1"

    def test_per_item_placeholders(self, mock_ocilion, test_context, mock_logger, three_items):
        node = make_node(test_context, mock_ocilion, mock_logger)
        node.execute(three_items, {"operation": "get", "worldId": WORLD, "id": "{{ $json.customer_id }}"})

        endpoints = [c.args[1] for c in mock_ocilion.request.call_args_list]
        assert endpoints == [f"{WORLD}/customers/c-1", f"{WORLD}/customers/c-2", f"{WORLD}/customers/c-3"]

    def test_world_id_key_selects_world(self, mock_ocilion, test_context, mock_logger):
        node = make_node(test_context, mock_ocilion, mock_logger)
        node.execute([Item()], {"operation": "get", "worldId": "my-world", "id": "c-1"})

        assert mock_ocilion.request.call_args.args[1] == "my-world/customers/c-1"

    def test_unknown_parameter_rejected(self, mock_ocilion, test_context, mock_logger):
        node = make_node(test_context, mock_ocilion, mock_logger)

        with pytest.raises(ParameterError) as exc_info:
            node.execute([Item()], {"operation": "get", "world_id": "my-world", "id": "c-1"})

        assert "world_id" in str(exc_info.value)
        mock_ocilion.request.assert_not_called()

    def test_unknown_operation(self, mock_ocilion, test_context, mock_logger):
        node = make_node(test_context, mock_ocilion, mock_logger)

        with pytest.raises(ParameterError):
            node.execute([Item()], {"operation": "delete"})

        mock_ocilion.request.assert_not_called()


class TestOcilionSession:
    """Session cookie handling."""

    def test_login_once_per_batch(self, mock_ocilion, test_context, mock_logger, three_items):
        node = make_node(test_context, mock_ocilion, mock_logger)
        node.execute(three_items, {"operation": "get", "id": "x"})

        mock_ocilion.login.assert_called_once()
        assert all(c.kwargs["cookie"] == COOKIE for c in mock_ocilion.request.call_args_list)

    def test_no_items_no_login(self, mock_ocilion, test_context, mock_logger):
        node = make_node(test_context, mock_ocilion, mock_logger)
        result = node.execute([], {"operation": "get"})

        mock_ocilion.login.assert_not_called()
        assert result.items == []
        assert result.status == ResultStatus.SKIPPED

    def test_auth_failure_aborts(self, mock_ocilion, test_context, mock_logger, three_items):
        mock_ocilion.login.side_effect = AuthenticationError("Ocilion login failed")

        node = make_node(test_context, mock_ocilion, mock_logger)
        with pytest.raises(AuthenticationError):
            node.execute(three_items, {"operation": "get", "id": "x"})

        mock_ocilion.request.assert_not_called()

    def test_auth_failure_with_continue_on_fail(self, mock_ocilion, continue_context, mock_logger, three_items):
        mock_ocilion.login.side_effect = AuthenticationError("Ocilion login failed")

        node = make_node(continue_context, mock_ocilion, mock_logger)
        result = node.execute(three_items, {"operation": "get", "id": "x"})

        assert [i.json for i in result.items] == [{"error": "Ocilion login failed"}] * 3
        assert result.status == ResultStatus.FAILURE
        mock_ocilion.request.assert_not_called()


class TestOcilionErrors:
    """Per-item error handling."""

    def test_continue_on_fail_records_error_in_place(
        self, mock_ocilion, continue_context, mock_logger, three_items
    ):
        mock_ocilion.request.side_effect = [
            {"id": "c-1"},
            ApiRequestError("Ocilion API error 404: not found", status_code=404),
            {"id": "c-3"},
        ]

        node = make_node(continue_context, mock_ocilion, mock_logger)
        result = node.execute(three_items, {"operation": "get", "id": "{{ $json.customer_id }}"})

        assert [i.json for i in result.items] == [
            {"id": "c-1"},
            {"error": "Ocilion API error 404: not found"},
            {"id": "c-3"},
        ]
        assert result.status == ResultStatus.PARTIAL
        mock_logger.item_failed.assert_called_once_with(1, "Ocilion API error 404: not found")

    def test_failure_aborts_remaining_items(self, mock_ocilion, test_context, mock_logger, three_items):
        mock_ocilion.request.side_effect = [
            {"id": "c-1"},
            ApiRequestError("boom"),
            {"id": "c-3"},
        ]

        node = make_node(test_context, mock_ocilion, mock_logger)
        with pytest.raises(ApiRequestError) as exc_info:
            node.execute(three_items, {"operation": "get", "id": "{{ $json.customer_id }}"})

        assert exc_info.value.item_index == 1
        assert exc_info.value.node_name == "ocilion"
        assert mock_ocilion.request.call_count == 2
        mock_logger.node_failed.assert_called_once()

    @pytest.mark.parametrize("operation", ["create", "update"])
    def test_malformed_body(self, mock_ocilion, test_context, mock_logger, operation):
        node = make_node(test_context, mock_ocilion, mock_logger)

        with pytest.raises(MalformedBodyError) as exc_info:
            node.execute([Item()], {"operation": operation, "id": "c-1", "body": "{bad json"})

        assert "{bad json" in str(exc_info.value)
        mock_ocilion.request.assert_not_called()

    def test_malformed_body_with_continue_on_fail(self, mock_ocilion, continue_context, mock_logger):
        items = [Item(json={"body": '{"ok": 1}'}), Item(json={"body": "{bad json"})]

        node = make_node(continue_context, mock_ocilion, mock_logger)
        result = node.execute(items, {"operation": "update", "id": "c-1", "body": "{{ $json.body }}"})

        assert len(result.items) == 2
        assert result.items[1].json == {"error": "Request body is not valid JSON: {bad json"}
        assert mock_ocilion.request.call_args_list == [
            call("PUT", f"{DEFAULT_WORLD_ID}/customers/c-1", body={"ok": 1}, query={}, cookie=COOKIE),
        ]
