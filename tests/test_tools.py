"""Tests for the built-in tools, dispatched through a registry the way the orchestrator does."""
from __future__ import annotations

import json
import shutil
import subprocess

import httpx
import pytest

from orchestrator.models import ToolCall
from tools import web
from tools.registry import ToolExecutionError, ToolRegistry, build_default_registry
from tools.shell import NO_OUTPUT, format_output


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "README.md").write_text("# Tool Agent\n\nHello.\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def tools(workspace) -> ToolRegistry:
    return build_default_registry(workspace)


def run(registry: ToolRegistry, name: str, **input) -> str:
    return registry.execute(ToolCall(name=name, input=input))


class TestReadFile:

    def test_reads_file_inside_workspace(self, tools):
        result = run(tools, "read_file", file_path="README.md")

        assert result.startswith("File contents of README.md:\n\n")
        assert "# Tool Agent" in result

    def test_missing_file_is_contained(self, tools):
        result = run(tools, "read_file", file_path="non-existent-file.txt")

        assert "Error executing tool 'read_file'" in result
        assert "Failed to read file" in result

    def test_path_escaping_workspace_is_denied(self, tools):
        result = run(tools, "read_file", file_path="../outside.txt")

        assert "Failed to read file" in result
        assert "Access denied" in result

    def test_absolute_path_outside_is_denied(self, tools):
        result = run(tools, "read_file", file_path="/etc/hostname")

        assert "Access denied" in result


class TestExecuteCommand:

    def test_echo_returns_output(self, tools):
        result = run(tools, "execute_command", command="echo hello")

        assert result == "Output:\nhello\n"

    def test_runs_in_workspace(self, tools, workspace):
        result = run(tools, "execute_command", command="ls")

        assert "README.md" in result

    @pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
    def test_git_status_on_clean_repo(self, tools, workspace):
        subprocess.run(["git", "init", "-q"], cwd=workspace, check=True)

        result = run(tools, "execute_command", command="git status")

        assert "Output:" in result
        assert "Error executing tool" not in result

    def test_invalid_command_is_contained(self, tools):
        result = run(tools, "execute_command", command="nonexistentcommand12345")

        assert "Error executing tool 'execute_command'" in result
        assert "Command execution failed" in result

    def test_timeout_is_a_tool_failure(self, workspace):
        from tools.shell import execute_command_tool

        registry = ToolRegistry()
        registry.register(execute_command_tool(workspace, timeout=1))

        result = run(registry, "execute_command", command="sleep 5")

        assert "Command execution failed" in result
        assert "timed out" in result

    def test_format_output(self):
        assert format_output("", "") == NO_OUTPUT
        assert format_output("", "warn\n") == "Errors:\nwarn\n"
        assert format_output("out\n", "warn\n") == "Output:\nout\n\n\nErrors:\nwarn\n"


def _mock_client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestHttpRequest:

    def test_formats_json_response(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "POST"
            assert request.content == b"ping"
            return httpx.Response(200, json={"ok": True})

        registry = ToolRegistry()
        registry.register(web.http_request_tool(_mock_client(handler)))

        result = run(registry, "http_request", url="https://example.com/api", method="POST", body="ping")

        assert result.startswith("HTTP POST https://example.com/api\nStatus: 200 OK\nContent-Type: application/json")
        assert 'Response:\n{\n  "ok": true\n}' in result

    def test_defaults_to_get_and_text_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, text="nope", headers={"content-type": "text/plain"})

        registry = ToolRegistry()
        registry.register(web.http_request_tool(_mock_client(handler)))

        result = run(registry, "http_request", url="https://example.com/missing")

        assert "HTTP GET https://example.com/missing" in result
        assert "Status: 404 Not Found" in result
        assert result.endswith("Response:\nnope")

    def test_invalid_url_is_contained(self, tools):
        result = run(tools, "http_request", url="invalid-url")

        assert "Error executing tool 'http_request'" in result
        assert "HTTP request failed" in result

    def test_network_error_is_contained(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        registry = ToolRegistry()
        registry.register(web.http_request_tool(_mock_client(handler)))

        result = run(registry, "http_request", url="https://example.com")

        assert "HTTP request failed: connection refused" in result

    def test_non_string_header_values_are_sent_as_text(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["X-Count"] == "3"
            assert request.headers["X-Debug"] == "True"
            return httpx.Response(204)

        registry = ToolRegistry()
        registry.register(web.http_request_tool(_mock_client(handler)))

        result = run(registry, "http_request", url="https://example.com", headers={"X-Count": 3, "X-Debug": True})

        assert "Status: 204 No Content" in result

    def test_bad_headers_and_body_are_reported(self):
        client = _mock_client(lambda request: httpx.Response(200))

        with pytest.raises(ToolExecutionError, match="HTTP request failed: headers must be an object"):
            web.http_request("https://example.com", headers=["X-Count: 3"], client=client)

        with pytest.raises(ToolExecutionError, match="HTTP request failed"):
            web.http_request("https://example.com", method="POST", body=42, client=client)


class TestSearch:

    def _registry(self, handler, key="test-key") -> ToolRegistry:
        registry = ToolRegistry()
        registry.register(web.search_tool(_mock_client(handler), api_key_fn=lambda: key))
        return registry

    def test_formats_results(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = dict(request.url.params)
            seen["token"] = request.headers["X-Subscription-Token"]
            return httpx.Response(200, json={"web": {"results": [
                {"title": "HTTPX", "url": "https://www.python-httpx.org", "description": "A client."},
                {"title": "Docs", "url": "https://example.com", "description": "More."},
            ]}})

        result = run(self._registry(handler), "search", query="httpx", count=2, country="GB")

        assert seen["params"] == {"q": "httpx", "count": "2", "country": "GB"}
        assert seen["token"] == "test-key"
        assert result.startswith('Search Results for: "httpx"\nCountry: GB, Results: 2\n\n')
        assert "1. HTTPX\n   URL: https://www.python-httpx.org\n   Description: A client." in result
        assert "2. Docs" in result

    def test_no_results(self):
        result = run(self._registry(lambda r: httpx.Response(200, json={})), "search", query="zzz")

        assert "Results: 0" in result
        assert "No search results found." in result

    def test_missing_api_key(self):
        result = run(self._registry(lambda r: httpx.Response(200, json={}), key=None), "search", query="x")

        assert "Search failed: BRAVE_API_KEY environment variable is not set" in result

    def test_upstream_error_status(self):
        result = run(self._registry(lambda r: httpx.Response(401, json={})), "search", query="x")

        assert "Search failed: Brave Search API error: 401 Unauthorized" in result

    def test_count_is_clamped(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.url.params)
            return httpx.Response(200, json={})

        run(self._registry(handler), "search", query="x", count=50)

        assert seen["count"] == "20"


class TestTodoWrite:

    def test_empty_list(self, tools):
        result = run(tools, "todo_write", todos=[])

        assert "Pending: 0, In progress: 0, Completed: 0" in result
        assert "No todos in the list." in result

    def test_all_statuses_and_priorities(self, tools):
        result = run(tools, "todo_write", todos=[
            {"id": "1", "content": "Plan", "status": "completed", "priority": "high"},
            {"id": "2", "content": "Build", "status": "in_progress", "priority": "medium"},
            {"id": "3", "content": "Ship", "status": "pending", "priority": "low"},
            {"id": "4", "content": "Celebrate", "status": "pending", "priority": "low"},
        ])

        assert "Todo list updated (4 total)" in result
        assert "Pending: 2, In progress: 1, Completed: 1" in result
        assert "✅ 🔴 Plan" in result
        assert "🔄 🟡 Build" in result
        assert "⏳ 🟢 Ship" in result
        assert "No todos" not in result
        # ids are not rendered
        assert "[1]" not in result

    def test_malformed_input_is_contained(self, tools):
        result = run(tools, "todo_write", todos=[{"id": "1", "status": "bogus"}])

        assert result.startswith("Error executing tool 'todo_write'")


def test_json_bodies_round_trip_through_render():
    resp = httpx.Response(200, json={"a": [1, 2]})

    assert json.loads(web._render_body(resp)) == {"a": [1, 2]}
