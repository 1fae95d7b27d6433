import json
import threading

import pytest

from thunderbird_mcp.client.session import (
    ClientSession,
    check_tool_error,
    unwrap_tool_result,
)
from thunderbird_mcp.config import ClientConfig
from thunderbird_mcp.protocol.base import INTERNAL_ERROR, PARSE_ERROR
from thunderbird_mcp.protocol.content import TextContent
from thunderbird_mcp.protocol.tools import CallToolRequest, CallToolResult
from thunderbird_mcp.shared.exceptions import (
    EmptyResultError,
    MCPError,
    RequestSerializationError,
    ResponseIdMismatchError,
    ToolError,
    TransportError,
)
from thunderbird_mcp.transport.http import HttpTransport
from tests.client.mock_transport import MockTransport


def text_envelope(*texts: str) -> dict:
    return {"content": [{"type": "text", "text": t} for t in texts]}


class TestClientSessionRequests:
    @pytest.fixture(autouse=True)
    def setup_fixtures(self):
        self.transport = MockTransport()
        self.session = ClientSession(self.transport)

    def test_sends_tools_call_wire_format(self):
        self.transport.queue_response(result={"ok": True})
        self.session.call_tool("searchMessages", {"query": "invoice"})

        payload, _ = self.transport.sent_messages[0]
        assert payload == {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "tools/call",
            "params": {"name": "searchMessages", "arguments": {"query": "invoice"}},
        }

    def test_missing_arguments_are_sent_as_empty_object(self):
        self.transport.queue_response(result={})
        self.session.call_tool("listAccounts")
        payload, _ = self.transport.sent_messages[0]
        assert payload["params"]["arguments"] == {}

    def test_request_ids_increase_per_call(self):
        for _ in range(3):
            self.transport.queue_response(result={})
            self.session.call_tool("listAccounts")
        ids = [payload["id"] for payload, _ in self.transport.sent_messages]
        assert ids == [1, 2, 3]

    def test_request_ids_are_unique_across_threads(self):
        ids = []
        lock = threading.Lock()

        def grab():
            for _ in range(100):
                request_id = self.session._next_request_id()
                with lock:
                    ids.append(request_id)

        threads = [threading.Thread(target=grab) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert sorted(ids) == list(range(1, 401))

    def test_transport_metadata_is_forwarded(self):
        self.transport.queue_response(result={})
        self.session.call_tool(
            "listAccounts", transport_metadata={"headers": {"X-Trace": "1"}}
        )
        _, metadata = self.transport.sent_messages[0]
        assert metadata == {"headers": {"X-Trace": "1"}}

    def test_send_request_turns_transport_error_into_internal_error(self):
        self.transport.queue_body(TransportError("[Errno 111] Connection refused"))
        response, metadata = self.session.send_request(CallToolRequest(name="x"))
        assert metadata is None
        assert response.id == 1
        assert response.error is not None
        assert response.error.code == INTERNAL_ERROR
        assert "Connection failed" in response.error.message
        assert "Is Thunderbird running" in response.error.message

    def test_unserializable_arguments_become_parse_error(self):
        with pytest.raises(MCPError) as exc_info:
            self.session.call_tool("sendMail", {"body": object()})
        assert exc_info.value.code == PARSE_ERROR
        assert "Failed to serialize request" in str(exc_info.value)
        assert self.transport.sent_messages == []

    def test_transport_serialization_error_becomes_parse_error(self):
        self.transport.queue_body(
            RequestSerializationError("Failed to serialize request: bad")
        )
        with pytest.raises(MCPError) as exc_info:
            self.session.call_tool("sendMail", {"body": "hi"})
        assert exc_info.value.code == PARSE_ERROR

    def test_close_closes_transport(self):
        self.session.close()
        assert self.transport.closed

    def test_context_manager_closes_transport(self):
        with ClientSession(self.transport) as session:
            assert session.transport is self.transport
        assert self.transport.closed


class TestCallToolErrors:
    @pytest.fixture(autouse=True)
    def setup_fixtures(self):
        self.transport = MockTransport()
        self.session = ClientSession(self.transport)

    def test_transport_failure_raises_mcp_error(self):
        self.transport.queue_body(TransportError("timed out after 30.0s"))
        with pytest.raises(MCPError, match="Is Thunderbird running") as exc_info:
            self.session.call_tool("listAccounts")
        assert exc_info.value.code == INTERNAL_ERROR
        assert "timed out" in str(exc_info.value)

    def test_protocol_error_surfaces_peer_message(self):
        self.transport.queue_response(
            error={"code": -32601, "message": "Unknown tool: foo"}
        )
        with pytest.raises(MCPError, match="Unknown tool: foo") as exc_info:
            self.session.call_tool("foo")
        assert exc_info.value.code == -32601
        assert exc_info.value.transport_metadata == {"status_code": 200}

    def test_malformed_body_raises_parse_error(self):
        self.transport.queue_body("Internal Server Error")
        with pytest.raises(MCPError) as exc_info:
            self.session.call_tool("listAccounts")
        assert exc_info.value.code == PARSE_ERROR
        assert "Invalid JSON" in str(exc_info.value)

    def test_missing_result_raises_empty_result_error(self):
        self.transport.queue_response(result=None)
        with pytest.raises(EmptyResultError, match="No result in response"):
            self.session.call_tool("listAccounts")

    def test_mismatched_response_id_is_rejected(self):
        self.transport.queue_response(result={"ok": True}, id=99)
        with pytest.raises(ResponseIdMismatchError) as exc_info:
            self.session.call_tool("listAccounts")
        assert exc_info.value.expected == 1
        assert exc_info.value.received == 99

    def test_null_response_id_with_error_surfaces_error(self):
        self.transport.queue_response(
            error={"code": -32700, "message": "Parse error"}, id=None
        )
        with pytest.raises(MCPError, match="Parse error"):
            self.session.call_tool("listAccounts")


class TestCallToolUnwrapping:
    @pytest.fixture(autouse=True)
    def setup_fixtures(self):
        self.transport = MockTransport()
        self.session = ClientSession(self.transport)

    def test_unwraps_json_text_block(self):
        self.transport.queue_response(result=text_envelope('{"a":1}'))
        assert self.session.call_tool("getMessage") == {"a": 1}

    def test_prose_text_is_returned_as_string(self):
        self.transport.queue_response(result=text_envelope("Compose window opened."))
        assert self.session.call_tool("sendMail") == "Compose window opened."

    def test_repairs_raw_newlines_in_response_and_payload(self):
        # Outer body carries a raw newline; the inner text then carries a raw
        # newline too once the outer layer is decoded.
        inner = '{"subject": "Hi", "body": "line1\\nline2"}'
        body = (
            '{"jsonrpc": "2.0", "result": {"content": [{"type": "text", "text": %s}]}}'
            % json.dumps(inner).replace("\\\\n", "\n")
        )
        self.transport.queue_body(body)
        assert self.session.call_tool("getMessage") == {
            "subject": "Hi",
            "body": "line1\nline2",
        }

    def test_result_without_envelope_is_returned_unchanged(self):
        self.transport.queue_response(result={"accounts": [{"name": "Work"}]})
        result = self.session.call_tool("listAccounts")
        assert result == {"accounts": [{"name": "Work"}]}

    def test_only_first_text_block_is_used(self):
        self.transport.queue_response(result=text_envelope('{"n": 1}', '{"n": 2}'))
        assert self.session.call_tool("listFolders") == {"n": 1}

    def test_call_tool_result_returns_typed_envelope(self):
        self.transport.queue_response(result=text_envelope("a", "b"))
        result = self.session.call_tool_result("listFolders")
        assert isinstance(result, CallToolResult)
        assert isinstance(result.content[0], TextContent)
        assert result.content[0].text == "a"
        assert len(result.content) == 2

    def test_call_tool_result_rejects_non_object_result(self):
        self.transport.queue_response(result=[1, 2])
        with pytest.raises(ValueError, match="Expected an object result"):
            self.session.call_tool_result("listFolders")

    def test_list_tools(self):
        self.transport.queue_response(
            result={
                "tools": [{"name": "listAccounts", "inputSchema": {"type": "object"}}]
            }
        )
        result = self.session.list_tools()
        assert [tool.name for tool in result.tools] == ["listAccounts"]
        payload, _ = self.transport.sent_messages[0]
        assert payload["method"] == "tools/list"


class TestUnwrapToolResult:
    def test_skips_non_text_blocks(self):
        result = {
            "content": [
                {"type": "image", "data": "AAAA", "mimeType": "image/png"},
                {"type": "text", "text": "[1, 2]"},
            ]
        }
        assert unwrap_tool_result(result) == [1, 2]

    def test_first_text_block_without_string_text_returns_result(self):
        result = {
            "content": [
                {"type": "text", "text": 5},
                {"type": "text", "text": '{"a": 1}'},
            ]
        }
        assert unwrap_tool_result(result) == result

    def test_content_not_a_list_returns_result(self):
        result = {"content": "hello"}
        assert unwrap_tool_result(result) is result

    def test_no_text_block_returns_result(self):
        result = {"content": [{"type": "image", "data": "", "mimeType": "image/png"}]}
        assert unwrap_tool_result(result) is result

    def test_non_object_result_is_returned(self):
        assert unwrap_tool_result([1, 2]) == [1, 2]
        assert unwrap_tool_result("done") == "done"

    def test_is_error_result_is_still_unwrapped(self):
        result = {
            "content": [{"type": "text", "text": "Folder not found"}],
            "isError": True,
        }
        assert unwrap_tool_result(result) == "Folder not found"


class TestCheckToolError:
    def test_raises_on_error_string(self):
        with pytest.raises(ToolError, match="Message not found"):
            check_tool_error({"error": "Message not found"})

    def test_passes_other_values_through(self):
        value = {"messages": [], "error": None}
        assert check_tool_error(value) is value
        assert check_tool_error([{"error": "x"}]) == [{"error": "x"}]


class TestDefaultTransport:
    def test_builds_http_transport_from_config(self):
        config = ClientConfig(url="http://127.0.0.1:9999/", timeout=5)
        session = ClientSession(config=config)
        try:
            assert isinstance(session.transport, HttpTransport)
            assert session.transport.url == "http://127.0.0.1:9999/"
            assert session.transport.timeout == 5
        finally:
            session.close()
