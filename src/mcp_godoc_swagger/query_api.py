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

"""Annotation query API for single-file and project-wide navigation.

Provides factory functions that create dictionaries of query functions
bound to a GoFileMetadata (single file) or ProjectIndex (project-wide).
All functions return plain dicts/strings for easy use in a REPL.
"""

from __future__ import annotations

import fnmatch
from dataclasses import asdict
from typing import Callable

from mcp_godoc_swagger.block_segmenter import find_block_at
from mcp_godoc_swagger.config import GodocConfig
from mcp_godoc_swagger.folding import fold_ranges, hidden_summary
from mcp_godoc_swagger.highlighter import highlight
from mcp_godoc_swagger.models import (
    AnnotationField,
    GoFileMetadata,
    ModelReference,
    ProjectIndex,
)
from mcp_godoc_swagger.navigation import Definition, ResolverChain
from mcp_godoc_swagger.position_resolver import resolve


def _model_dict(ref: ModelReference) -> dict:
    return {
        "qualified_name": ref.qualified_name,
        "line": ref.line,
        "columns": [ref.column_start, ref.column_end],
        "nesting_level": ref.nesting_level,
        "origin": ref.origin,
    }


def _field_dict(f: AnnotationField) -> dict:
    """Only the attributes that are set, to keep results small."""
    result = {"line": f.line, "kind": f.kind, "keyword": f.keyword}
    for key, value in asdict(f).items():
        if key in result or key == "models":
            continue
        if value is None or value == () or value == "":
            continue
        result[key] = list(value) if isinstance(value, tuple) else value
    if f.models:
        result["models"] = [_model_dict(ref) for ref in f.models]
    return result


def _definition_dict(definition: Definition) -> dict:
    loc = definition.location
    return {
        "qualified_name": loc.qualified_name,
        "file": loc.file_path,
        "line": loc.line,
        "kind": loc.kind,
        "resolver": definition.resolver,
    }


# ---------------------------------------------------------------------------
# Single-file query functions
# ---------------------------------------------------------------------------


def create_file_query_functions(
    metadata: GoFileMetadata,
    config: GodocConfig | None = None,
    chain: ResolverChain | None = None,
) -> dict[str, Callable]:
    """Create query functions bound to a single file's metadata.

    ``chain`` is required for goto_definition only.
    """
    config = config or GodocConfig()

    def get_godoc_blocks() -> list[dict]:
        """All annotation blocks with their line ranges and field counts."""
        return [
            {
                "lines": [a.block.start_line, a.block.end_line],
                "fields": len(a.fields),
                "models": len(a.models),
            }
            for a in metadata.annotations
        ]

    def get_annotations(line: int | None = None) -> list[dict]:
        """Fields of every block, or of the block covering ``line``."""
        result = []
        for a in metadata.annotations:
            if line is not None and not a.block.contains(line):
                continue
            result.append({
                "lines": [a.block.start_line, a.block.end_line],
                "fields": [_field_dict(f) for f in a.fields],
            })
        return result

    def get_model_at(line: int, column: int) -> dict:
        """The model reference at or near (line, column)."""
        ref = resolve(metadata.annotations, line, column, config.proximity)
        if ref is None:
            return {"error": f"no model reference near line {line}, column {column}"}
        return _model_dict(ref)

    def goto(line: int, column: int) -> dict:
        """Declaration of the model reference at or near (line, column)."""
        if chain is None:
            return {"error": "navigation is not configured"}
        ref = resolve(metadata.annotations, line, column, config.proximity)
        if ref is None:
            return {"error": f"no model reference near line {line}, column {column}"}
        definition = chain.find(ref.qualified_name, metadata)
        if definition is None:
            return {"error": f"definition of '{ref.qualified_name}' not found"}
        return _definition_dict(definition)

    def get_highlights() -> list[dict]:
        """Highlight spans: line, columns and group name."""
        return [
            {"line": s.line, "columns": [s.column_start, s.column_end], "group": s.group}
            for s in highlight(metadata.lines, config.marker)
        ]

    def get_fold_ranges(line: int | None = None) -> list[dict]:
        """Collapsible regions, one per multi-line block.

        With ``line``, only the fold of the block under that line (fold under
        cursor); empty when the line is outside every block.
        """
        ranges = fold_ranges(metadata.lines, config.marker)
        if line is not None:
            block = find_block_at(metadata.lines, line, config.marker)
            if block is None:
                return []
            ranges = [r for r in ranges if r.start_line == block.start_line]
        return [
            {
                "lines": [r.start_line, r.end_line],
                "summary": r.summary,
                "hidden_text": hidden_summary(r),
            }
            for r in ranges
        ]

    def get_endpoints() -> list[dict]:
        """Every @Router line in the file with its block's summary."""
        result = []
        for a in metadata.annotations:
            summary = next((f.value for f in a.fields if f.keyword == "Summary"), None)
            for f in a.fields:
                if f.kind != "router":
                    continue
                result.append({
                    "path": f.router_path,
                    "methods": list(f.router_methods),
                    "line": f.line,
                    "summary": summary,
                })
        return result

    return {
        "get_godoc_blocks": get_godoc_blocks,
        "get_annotations": get_annotations,
        "get_model_at": get_model_at,
        "goto_definition": goto,
        "get_highlights": get_highlights,
        "get_fold_ranges": get_fold_ranges,
        "get_endpoints": get_endpoints,
    }


# ---------------------------------------------------------------------------
# Project-wide query functions
# ---------------------------------------------------------------------------


def _resolve_file(index: ProjectIndex, file_path: str) -> GoFileMetadata | None:
    """Resolve a file path to its metadata, trying exact and suffix matches."""
    if file_path in index.files:
        return index.files[file_path]
    for stored_path, meta in index.files.items():
        if stored_path.endswith(file_path) or file_path.endswith(stored_path):
            return meta
    return None


def create_project_query_functions(
    index: ProjectIndex,
    config: GodocConfig | None = None,
    chain: ResolverChain | None = None,
) -> dict[str, Callable]:
    """Create query functions bound to a project-wide index.

    Returns a dict mapping function names to callables. Each function returns
    plain dicts or strings suitable for printing in a REPL.
    """
    config = config or GodocConfig()

    def _file_functions(file_path: str) -> dict[str, Callable] | None:
        meta = _resolve_file(index, file_path)
        if meta is None:
            return None
        return create_file_query_functions(meta, config, chain)

    def _not_found(file_path: str) -> str:
        return f"Error: file '{file_path}' not found in index"

    def get_project_summary() -> str:
        """High-level overview: file count, packages, annotated endpoints."""
        parts = [
            f"Project: {index.root_path}",
            f"Files: {index.total_files}, Lines: {index.total_lines}, "
            f"Godoc blocks: {index.total_blocks}, Types: {index.total_types}",
        ]

        packages = sorted({m.package for m in index.files.values() if m.package})
        if packages:
            parts.append(f"Packages: {', '.join(packages)}")

        endpoints = list_endpoints()
        if endpoints:
            shown = [
                f"{'/'.join(e['methods']).upper() or '?'} {e['path']} ({e['file']})"
                for e in endpoints[:20]
            ]
            parts.append(f"Endpoints: {', '.join(shown)}")
            if len(endpoints) > 20:
                parts.append(f"  ... and {len(endpoints) - 20} more")

        return "\n".join(parts)

    def list_files(pattern: str | None = None, max_results: int = 0) -> list[str]:
        """List indexed files, optional glob filter (using fnmatch)."""
        paths = sorted(index.files.keys())
        if pattern:
            paths = [p for p in paths if fnmatch.fnmatch(p, pattern)]
        if max_results > 0:
            paths = paths[:max_results]
        return paths

    def get_godoc_blocks(file_path: str) -> list[dict] | str:
        fns = _file_functions(file_path)
        if fns is None:
            return _not_found(file_path)
        return fns["get_godoc_blocks"]()

    def get_annotations(file_path: str, line: int | None = None) -> list[dict] | str:
        fns = _file_functions(file_path)
        if fns is None:
            return _not_found(file_path)
        return fns["get_annotations"](line)

    def get_model_at(file_path: str, line: int, column: int) -> dict | str:
        fns = _file_functions(file_path)
        if fns is None:
            return _not_found(file_path)
        return fns["get_model_at"](line, column)

    def goto(file_path: str, line: int, column: int) -> dict | str:
        fns = _file_functions(file_path)
        if fns is None:
            return _not_found(file_path)
        return fns["goto_definition"](line, column)

    def get_highlights(file_path: str) -> list[dict] | str:
        fns = _file_functions(file_path)
        if fns is None:
            return _not_found(file_path)
        return fns["get_highlights"]()

    def get_fold_ranges(file_path: str, line: int | None = None) -> list[dict] | str:
        fns = _file_functions(file_path)
        if fns is None:
            return _not_found(file_path)
        return fns["get_fold_ranges"](line)

    def find_type(name: str) -> list[dict] | dict:
        """Declarations of a type, by "package.Type" or bare "Type"."""
        if "." in name:
            locations = index.type_table.get(name, [])
        else:
            locations = [
                loc
                for key, locs in sorted(index.type_table.items())
                if key.rsplit(".", 1)[-1] == name
                for loc in locs
            ]
        if not locations:
            return {"error": f"type '{name}' not found"}
        return [
            {"qualified_name": loc.qualified_name, "file": loc.file_path,
             "line": loc.line, "kind": loc.kind}
            for loc in locations
        ]

    def list_endpoints(pattern: str | None = None, max_results: int = 0) -> list[dict]:
        """All @Router endpoints, optionally filtered by a glob on the path."""
        result = []
        for path in sorted(index.files):
            meta = index.files[path]
            for endpoint in create_file_query_functions(meta, config)["get_endpoints"]():
                if pattern and not fnmatch.fnmatch(endpoint["path"], pattern):
                    continue
                endpoint["file"] = path
                result.append(endpoint)
        if max_results > 0:
            result = result[:max_results]
        return result

    return {
        "get_project_summary": get_project_summary,
        "list_files": list_files,
        "get_godoc_blocks": get_godoc_blocks,
        "get_annotations": get_annotations,
        "get_model_at": get_model_at,
        "goto_definition": goto,
        "find_type": find_type,
        "list_endpoints": list_endpoints,
        "get_highlights": get_highlights,
        "get_fold_ranges": get_fold_ranges,
    }
