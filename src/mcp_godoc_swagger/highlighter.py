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

"""Highlight spans for the sub-fields of annotation lines.

Produces group names only; mapping groups to colors is up to the editor.
"""

import re
from typing import Sequence

from mcp_godoc_swagger.block_segmenter import DEFAULT_MARKER
from mcp_godoc_swagger.field_extractor import analyze
from mcp_godoc_swagger.models import AnnotationField, HighlightSpan

MAX_MODEL_LEVEL = 3

_COMMENT_TOKEN_RE = re.compile(r'//')
_KEYWORD_TOKEN_RE = re.compile(r'@\w+')
_DESCRIPTION_SPAN_RE = re.compile(r'"[^"]*"')
_PATH_VAR_RE = re.compile(r'\{[^}]*\}')

_RESPONSE_SPAN_RE = re.compile(
    r'@(?:Success|Failure)\s+(?P<status>\d+)\s+(?P<kind>\{[^}]*\})'
)
_PARAM_SPAN_RE = re.compile(
    r'@Param\s+(?P<name>\S+)\s+(?P<location>\S+)'
    r'(?:\s+(?P<type>[^\s"]+))?'
    r'(?:\s+(?P<required>true|false)\b)?'
)
_ROUTER_SPAN_RE = re.compile(r'@Router\s+(?P<path>[^\s\[]+)(?:\s+(?P<method>\[[^\]]*\]))?')
_SECURITY_SPAN_RE = re.compile(r'@Security\s+(?P<scheme>\w+)')


def model_group(origin: str, level: int) -> str:
    """Group name for a model reference, e.g. ``model_reference.request.l2``."""
    return f"model_reference.{origin}.l{min(level, MAX_MODEL_LEVEL)}"


def _group_span(line_number: int, m: re.Match, name: str, group: str) -> list[HighlightSpan]:
    if m.group(name) is None:
        return []
    return [HighlightSpan(line_number, m.start(name), m.end(name), group)]


def _field_spans(line: str, f: AnnotationField) -> list[HighlightSpan]:
    spans: list[HighlightSpan] = []
    n = f.line

    km = _KEYWORD_TOKEN_RE.search(line)
    if km:
        spans.append(HighlightSpan(n, km.start(), km.end(), f"keyword.{f.kind}"))

    if f.kind in ("success", "failure"):
        m = _RESPONSE_SPAN_RE.search(line)
        if m:
            spans += _group_span(n, m, "status", "status_code")
            spans += _group_span(n, m, "kind", "type_keyword")
    elif f.kind == "param":
        m = _PARAM_SPAN_RE.search(line)
        if m:
            spans += _group_span(n, m, "name", "param_name")
            spans += _group_span(n, m, "location", "param_location")
            spans += _group_span(n, m, "type", "param_type")
            spans += _group_span(n, m, "required", "param_required")
    elif f.kind == "router":
        m = _ROUTER_SPAN_RE.search(line)
        if m:
            spans += _group_span(n, m, "path", "router_path")
            for var in _PATH_VAR_RE.finditer(m.group("path")):
                spans.append(HighlightSpan(
                    n, m.start("path") + var.start(), m.start("path") + var.end(),
                    "router_path_var",
                ))
            spans += _group_span(n, m, "method", "router_method")
    elif f.kind == "security":
        m = _SECURITY_SPAN_RE.search(line)
        if m:
            spans += _group_span(n, m, "scheme", "security_scheme")

    if f.description is not None:
        dm = _DESCRIPTION_SPAN_RE.search(line)
        if dm:
            spans.append(HighlightSpan(n, dm.start(), dm.end(), "description_text"))

    for ref in f.models:
        spans.append(HighlightSpan(
            n, ref.column_start, ref.column_end, model_group(ref.origin, ref.nesting_level)
        ))
    return spans


def highlight(lines: Sequence[str], marker: str = DEFAULT_MARKER) -> list[HighlightSpan]:
    """Compute highlight spans for every annotation block in ``lines``."""
    spans: list[HighlightSpan] = []
    for entry in analyze(lines, marker):
        block = entry.block
        for line_number in range(block.start_line, block.end_line + 1):
            line = lines[line_number - 1]
            cm = _COMMENT_TOKEN_RE.search(line)
            if cm is None:
                continue
            if line_number == block.start_line:
                spans.append(HighlightSpan(line_number, cm.start(), len(line), "godoc_line"))
            else:
                spans.append(HighlightSpan(line_number, cm.start(), cm.end(), "comment"))
        for f in entry.fields:
            spans.extend(_field_spans(lines[f.line - 1], f))

    spans.sort(key=lambda s: (s.line, s.column_start, s.column_end))
    return spans
