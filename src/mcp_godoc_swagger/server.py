# mcp-godoc-swagger - Swagger godoc annotation indexer with MCP server
# Copyright (C) 2026 Michael Doyle
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.
#
# Commercial licensing available. See COMMERCIAL-LICENSE.md for details.

"""MCP server for godoc swagger annotations.

Exposes annotation blocks, highlight spans, fold ranges and model-reference
navigation for a Go project as MCP tools.

Usage:
    PROJECT_ROOT=/path/to/project python -m mcp_godoc_swagger.server

Environment:
    GODOC_DEBUG, GODOC_MARKER, GODOC_PROXIMITY, GODOC_NAVIGATION_STYLE,
    GODOC_MAX_FILE_SIZE (see mcp_godoc_swagger.config).
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent
import mcp.types as types

from mcp_godoc_swagger.config import GodocConfig
from mcp_godoc_swagger.navigation import create_resolver_chain
from mcp_godoc_swagger.project_indexer import ProjectIndexer
from mcp_godoc_swagger.query_api import create_project_query_functions

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Module-level state
# ---------------------------------------------------------------------------

server = Server("mcp-godoc-swagger")

_config: GodocConfig | None = None
_indexer: ProjectIndexer | None = None
_query_fns: dict | None = None


def _format_result(value: object) -> str:
    """Format a query result as readable text."""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2, default=str)
    return str(value)


def _build_index(config: GodocConfig | None = None) -> None:
    """Build (or rebuild) the project index and query functions."""
    global _config, _indexer, _query_fns

    _config = config or _config or GodocConfig.from_env()
    print(f"[mcp-godoc-swagger] Indexing project: {_config.project_root}", file=sys.stderr)

    _indexer = ProjectIndexer(
        _config.project_root,
        max_file_size_bytes=_config.max_file_size_bytes,
        marker=_config.marker,
    )
    index = _indexer.index()
    chain = create_resolver_chain(_config, _indexer)
    _query_fns = create_project_query_functions(index, _config, chain)

    print(
        f"[mcp-godoc-swagger] Indexed {index.total_files} files, "
        f"{index.total_lines} lines, "
        f"{index.total_blocks} godoc blocks, "
        f"{index.total_types} types "
        f"in {index.index_build_time_seconds:.2f}s "
        f"(navigation: {', '.join(chain.names)})",
        file=sys.stderr,
    )


def _reindex_file(file_path: str) -> str:
    """Refresh a single file in the existing index.

    A file that no longer exists is removed from the index. Without an
    index yet, the whole project is indexed instead.
    """
    global _query_fns

    if _indexer is None or _indexer.project_index is None:
        _build_index()
        return "Project re-indexed successfully."

    abs_path = (
        os.path.abspath(file_path)
        if os.path.isabs(file_path)
        else os.path.join(_indexer.root_path, file_path)
    )
    rel_path = os.path.relpath(abs_path, _indexer.root_path).replace(os.sep, "/")
    if _indexer.is_excluded(rel_path):
        return f"Skipped '{rel_path}': excluded from the index."

    if os.path.isfile(abs_path):
        _indexer.reindex_file(rel_path)
        action = "re-indexed"
    else:
        _indexer.remove_file(rel_path)
        action = "removed from index"

    index = _indexer.project_index
    chain = create_resolver_chain(_config, _indexer)
    _query_fns = create_project_query_functions(index, _config, chain)
    print(f"[mcp-godoc-swagger] {rel_path} {action}", file=sys.stderr)
    return f"File '{rel_path}' {action}."


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------

_FILE_PATH_PROPERTY = {
    "type": "string",
    "description": "Relative path to a Go file in the project.",
}

_LINE_PROPERTY = {
    "type": "integer",
    "description": "1-indexed line number.",
}

_COLUMN_PROPERTY = {
    "type": "integer",
    "description": "0-indexed column on the line.",
}

_MAX_RESULTS_PROPERTY = {
    "type": "integer",
    "description": "Maximum number of results to return (0 = unlimited, default 0).",
}

TOOLS = [
    Tool(
        name="get_project_summary",
        description="High-level overview: Go files, packages, annotated endpoints.",
        inputSchema={
            "type": "object",
            "properties": {},
        },
    ),
    Tool(
        name="list_files",
        description="List indexed Go files. Optional glob pattern to filter (e.g. 'internal/**').",
        inputSchema={
            "type": "object",
            "properties": {
                "pattern": {
                    "type": "string",
                    "description": "Glob pattern to filter files (uses fnmatch).",
                },
                "max_results": _MAX_RESULTS_PROPERTY,
            },
        },
    ),
    Tool(
        name="get_godoc_blocks",
        description="Line ranges of the godoc swagger annotation blocks in a file.",
        inputSchema={
            "type": "object",
            "properties": {"file_path": _FILE_PATH_PROPERTY},
            "required": ["file_path"],
        },
    ),
    Tool(
        name="get_annotations",
        description="Parsed annotation fields (status codes, params, routes, security, model references) of a file's blocks.",
        inputSchema={
            "type": "object",
            "properties": {
                "file_path": _FILE_PATH_PROPERTY,
                "line": {
                    "type": "integer",
                    "description": "Only the block covering this 1-indexed line.",
                },
            },
            "required": ["file_path"],
        },
    ),
    Tool(
        name="get_model_at",
        description="The model reference (package.Type) at or within the configured proximity (GODOC_PROXIMITY columns) of a position.",
        inputSchema={
            "type": "object",
            "properties": {
                "file_path": _FILE_PATH_PROPERTY,
                "line": _LINE_PROPERTY,
                "column": _COLUMN_PROPERTY,
            },
            "required": ["file_path", "line", "column"],
        },
    ),
    Tool(
        name="goto_definition",
        description="Find the declaration of the model reference at a position in an annotation block.",
        inputSchema={
            "type": "object",
            "properties": {
                "file_path": _FILE_PATH_PROPERTY,
                "line": _LINE_PROPERTY,
                "column": _COLUMN_PROPERTY,
            },
            "required": ["file_path", "line", "column"],
        },
    ),
    Tool(
        name="find_type",
        description="Where a Go type is declared, by 'package.Type' or bare 'Type'.",
        inputSchema={
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "Type name (e.g. 'models.User' or 'User').",
                },
            },
            "required": ["name"],
        },
    ),
    Tool(
        name="list_endpoints",
        description="All @Router endpoints across the project with methods, file, line and summary.",
        inputSchema={
            "type": "object",
            "properties": {
                "pattern": {
                    "type": "string",
                    "description": "Glob pattern on the route path (e.g. '/users/*').",
                },
                "max_results": _MAX_RESULTS_PROPERTY,
            },
        },
    ),
    Tool(
        name="get_highlights",
        description="Highlight spans (line, columns, group) for the annotation blocks of a file.",
        inputSchema={
            "type": "object",
            "properties": {"file_path": _FILE_PATH_PROPERTY},
            "required": ["file_path"],
        },
    ),
    Tool(
        name="get_fold_ranges",
        description="Foldable regions for the annotation blocks of a file, with summary text. "
        "With a line, only the fold of the block under that line.",
        inputSchema={
            "type": "object",
            "properties": {
                "file_path": _FILE_PATH_PROPERTY,
                "line": {
                    "type": "integer",
                    "description": "Only the fold of the block covering this 1-indexed line.",
                },
            },
            "required": ["file_path"],
        },
    ),
    Tool(
        name="reindex",
        description="Re-index the project, or a single file when file_path is given. "
        "Use after editing Go files to refresh annotations and types.",
        inputSchema={
            "type": "object",
            "properties": {
                "file_path": {
                    "type": "string",
                    "description": "Re-index only this file (removed from the index if it no longer exists).",
                },
            },
        },
    ),
]


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def _dispatch(name: str, arguments: dict) -> object:
    """Run a query tool against the current index."""
    if _query_fns is None:
        return "Error: index not built yet. Call reindex first."

    if name == "get_project_summary":
        return _query_fns["get_project_summary"]()

    if name in ("list_files", "list_endpoints"):
        return _query_fns[name](
            arguments.get("pattern"),
            max_results=arguments.get("max_results", 0),
        )

    if name in ("get_godoc_blocks", "get_highlights"):
        return _query_fns[name](arguments["file_path"])

    if name in ("get_annotations", "get_fold_ranges"):
        return _query_fns[name](arguments["file_path"], arguments.get("line"))

    if name in ("get_model_at", "goto_definition"):
        return _query_fns[name](
            arguments["file_path"],
            int(arguments["line"]),
            int(arguments["column"]),
        )

    if name == "find_type":
        return _query_fns["find_type"](arguments["name"])

    return f"Error: unknown tool '{name}'"


# ---------------------------------------------------------------------------
# MCP handlers
# ---------------------------------------------------------------------------


@server.list_tools()
async def list_tools() -> list[Tool]:
    return TOOLS


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[types.TextContent]:
    try:
        if name == "reindex":
            file_path = (arguments or {}).get("file_path")
            if file_path:
                return [TextContent(type="text", text=_reindex_file(file_path))]
            _build_index()
            return [TextContent(type="text", text="Project re-indexed successfully.")]

        result = _dispatch(name, arguments or {})
        return [TextContent(type="text", text=_format_result(result))]

    except Exception as e:
        logger.error("Error in %s: %s", name, traceback.format_exc())
        return [TextContent(type="text", text=f"Error: {e}")]


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def main():
    config = GodocConfig.from_env()
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if config.debug else logging.INFO,
        format="[mcp-godoc-swagger] %(levelname)s %(name)s: %(message)s",
    )
    _build_index(config)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main_sync():
    """Synchronous entry point for console_scripts."""
    import asyncio

    asyncio.run(main())


if __name__ == "__main__":
    main_sync()
