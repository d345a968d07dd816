"""Tests for the MCP server's dispatch and result formatting."""

import asyncio
import json

import pytest

import mcp_godoc_swagger.server as srv
from conftest import column_of
from mcp_godoc_swagger.config import GodocConfig


@pytest.fixture(autouse=True)
def reset_server_state():
    srv._config = None
    srv._indexer = None
    srv._query_fns = None
    yield
    srv._config = None
    srv._indexer = None
    srv._query_fns = None


@pytest.fixture
def built(go_project):
    srv._build_index(GodocConfig(project_root=str(go_project)))


class TestFormatResult:
    def test_string_passthrough(self):
        assert srv._format_result("hello") == "hello"

    def test_dict_as_json(self):
        assert json.loads(srv._format_result({"a": [1, 2]})) == {"a": [1, 2]}

    def test_other(self):
        assert srv._format_result(42) == "42"


class TestTools:
    def test_tool_names(self):
        assert [t.name for t in srv.TOOLS] == [
            "get_project_summary",
            "list_files",
            "get_godoc_blocks",
            "get_annotations",
            "get_model_at",
            "goto_definition",
            "find_type",
            "list_endpoints",
            "get_highlights",
            "get_fold_ranges",
            "reindex",
        ]

    def test_position_tools_require_coordinates(self):
        tools = {t.name: t for t in srv.TOOLS}
        for name in ("get_model_at", "goto_definition"):
            assert tools[name].inputSchema["required"] == ["file_path", "line", "column"]

    def test_model_at_description_not_hard_coded(self):
        tools = {t.name: t for t in srv.TOOLS}
        assert "10 columns" not in tools["get_model_at"].description
        assert "proximity" in tools["get_model_at"].description

    def test_optional_line_and_file_arguments(self):
        tools = {t.name: t for t in srv.TOOLS}
        assert "line" in tools["get_fold_ranges"].inputSchema["properties"]
        assert "file_path" in tools["reindex"].inputSchema["properties"]
        assert "required" not in tools["reindex"].inputSchema


class TestDispatch:
    def test_before_index(self):
        assert srv._dispatch("get_project_summary", {}) == "Error: index not built yet. Call reindex first."

    def test_unknown_tool(self, built):
        assert srv._dispatch("teleport", {}) == "Error: unknown tool 'teleport'"

    def test_build_index_logs_to_stderr(self, go_project, capsys):
        srv._build_index(GodocConfig(project_root=str(go_project)))
        err = capsys.readouterr().err
        assert "[mcp-godoc-swagger] Indexed 6 files" in err
        assert "navigation: document, index, search" in err

    def test_summary(self, built):
        assert "Godoc blocks: 2" in srv._dispatch("get_project_summary", {})

    def test_list_files(self, built):
        result = srv._dispatch("list_files", {"pattern": "legacy/*"})
        assert result == ["legacy/old.go"]

    def test_get_annotations(self, built):
        result = srv._dispatch("get_annotations", {"file_path": "internal/handlers/user.go", "line": 18})
        assert result[0]["lines"] == [15, 20]

    def test_goto_definition_coerces_numbers(self, built):
        col = column_of(19, "models.ErrorResponse")
        result = srv._dispatch(
            "goto_definition",
            {"file_path": "internal/handlers/user.go", "line": "19", "column": str(col)},
        )
        assert result["file"] == "internal/models/user.go"
        assert result["line"] == 9

    def test_find_type(self, built):
        assert srv._dispatch("find_type", {"name": "legacy.Widget"})[0]["line"] == 3

    def test_fold_under_line(self, built):
        result = srv._dispatch("get_fold_ranges", {"file_path": "internal/handlers/user.go", "line": 26})
        assert [f["lines"] for f in result] == [[23, 28]]
        assert srv._dispatch("get_fold_ranges", {"file_path": "internal/handlers/user.go", "line": 2}) == []
        assert len(srv._dispatch("get_fold_ranges", {"file_path": "internal/handlers/user.go"})) == 2


class TestCallTool:
    def test_error_wrapped(self, built):
        # missing file_path
        content = asyncio.run(srv.call_tool("get_highlights", {}))
        assert content[0].text.startswith("Error:")

    def test_reindex(self, go_project, built):
        (go_project / "legacy" / "new.go").write_text("package legacy\n\ntype Gizmo struct{}\n")
        content = asyncio.run(srv.call_tool("reindex", {}))
        assert content[0].text == "Project re-indexed successfully."
        assert srv._dispatch("find_type", {"name": "Gizmo"})[0]["file"] == "legacy/new.go"

    def test_result_formatted(self, built):
        content = asyncio.run(srv.call_tool("list_files", {"pattern": "legacy/*"}))
        assert json.loads(content[0].text) == ["legacy/old.go"]

    def test_reindex_single_file(self, go_project, built):
        (go_project / "legacy" / "old.go").write_text(
            "package legacy\n\ntype Widget struct{}\n\ntype Gadget struct{}\n"
        )
        content = asyncio.run(srv.call_tool("reindex", {"file_path": "legacy/old.go"}))
        assert content[0].text == "File 'legacy/old.go' re-indexed."
        assert srv._dispatch("find_type", {"name": "legacy.Gadget"})[0]["line"] == 5
        assert srv._indexer.project_index.total_types == 8

    def test_reindex_new_file_absolute_path(self, go_project, built):
        new_file = go_project / "internal" / "models" / "late.go"
        new_file.write_text("package models\n\ntype Late struct{}\n")
        content = asyncio.run(srv.call_tool("reindex", {"file_path": str(new_file)}))
        assert content[0].text == "File 'internal/models/late.go' re-indexed."
        assert "internal/models/late.go" in srv._dispatch("list_files", {"pattern": "internal/models/*"})

    def test_reindex_deleted_file(self, go_project, built):
        (go_project / "legacy" / "old.go").unlink()
        content = asyncio.run(srv.call_tool("reindex", {"file_path": "legacy/old.go"}))
        assert content[0].text == "File 'legacy/old.go' removed from index."
        assert srv._dispatch("list_files", {"pattern": "legacy/*"}) == []
        assert srv._dispatch("find_type", {"name": "Widget"}) == {"error": "type 'Widget' not found"}

    def test_reindex_excluded_file(self, built):
        content = asyncio.run(srv.call_tool("reindex", {"file_path": "vendor/lib/lib.go"}))
        assert content[0].text.startswith("Skipped 'vendor/lib/lib.go'")
        assert srv._dispatch("find_type", {"name": "Vendored"}) == {"error": "type 'Vendored' not found"}

    def test_reindex_file_before_index(self, go_project, monkeypatch):
        monkeypatch.setenv("PROJECT_ROOT", str(go_project))
        content = asyncio.run(srv.call_tool("reindex", {"file_path": "legacy/old.go"}))
        assert content[0].text == "Project re-indexed successfully."
        assert srv._indexer.project_index.total_files == 6
