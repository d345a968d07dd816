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

"""Regex-based extraction of annotation fields (best-effort).

Handles the swag annotation lines that matter for highlighting and
navigation:

    // @Success 200 {object} responses.APIResponse[models.Item] "ok"
    // @Failure 404 {object} models.ErrorResponse
    // @Param   id path int true "User ID"
    // @Router  /users/{id} [get]
    // @Security ApiKeyAuth
    // @Summary / @Description / @Tags / @Accept / @Produce

Malformed lines yield no field; nothing here raises.
"""

import re
from typing import Optional, Sequence

from mcp_godoc_swagger.block_segmenter import DEFAULT_MARKER, segment
from mcp_godoc_swagger.models import (
    AnnotationBlock,
    AnnotationField,
    BlockAnnotations,
    ModelReference,
)

_KEYWORD_RE = re.compile(r'^\s*//\s*@(\w+)\s*(.*)$')

# 200 {object} rest-of-line
_RESPONSE_RE = re.compile(r'^(\d+)\s+\{([^}]+)\}(.*)$')

# /users/{id} [get,post]
_ROUTER_RE = re.compile(r'^(\S+)(?:\s+\[([^\]]*)\])?')

_SECURITY_RE = re.compile(r'^(\w+)')

# Trailing quoted description: everything from the first `"` preceded by
# whitespace.
_DESCRIPTION_RE = re.compile(r'^(.*?)\s+"(.*?)"?\s*$')

_QUALIFIED_NAME_RE = re.compile(r'\w+\.\w+')

_TAG_KEYWORDS = frozenset({"Summary", "Description", "Tags", "Accept", "Produce"})

RESPONSE_ORIGIN = "response"
REQUEST_ORIGIN = "request"


def nesting_level(line: str, column: int) -> int:
    """Unmatched ``[`` count in ``line[:column]``, floored at zero."""
    prefix = line[:column]
    return max(0, prefix.count("[") - prefix.count("]"))


def _split_description(text: str) -> tuple[str, Optional[str]]:
    """Split ``text`` into (value region, description)."""
    m = _DESCRIPTION_RE.match(text)
    if m:
        return m.group(1).strip(), m.group(2)
    if text.startswith('"'):
        return "", text.strip().strip('"')
    return text.strip(), None


def _find_models(
    line: str, line_number: int, region: str, origin: str
) -> list[ModelReference]:
    """Locate every ``package.Type`` in ``region`` on ``line``.

    Columns come from the first occurrence of the name on the whole line,
    so a name repeated on one line always maps to its first position.
    """
    refs: list[ModelReference] = []
    for m in _QUALIFIED_NAME_RE.finditer(region):
        name = m.group(0)
        start = line.find(name)
        if start < 0:
            continue
        refs.append(ModelReference(
            line=line_number,
            column_start=start,
            column_end=start + len(name),
            qualified_name=name,
            nesting_level=nesting_level(line, start),
            origin=origin,
        ))
    return refs


def _parse_required(token: Optional[str]) -> Optional[bool]:
    if token == "true":
        return True
    if token == "false":
        return False
    return None


def extract_line(line: str, line_number: int) -> Optional[AnnotationField]:
    """Parse a single annotation line, or return None if it is not one we know."""
    km = _KEYWORD_RE.match(line)
    if not km:
        return None
    keyword = km.group(1)
    rest = km.group(2).rstrip()

    if keyword in ("Success", "Failure"):
        rm = _RESPONSE_RE.match(rest)
        if not rm:
            return None
        value, description = _split_description(rest)
        model_region, _ = _split_description(rm.group(3).strip())
        return AnnotationField(
            line=line_number,
            kind=keyword.lower(),
            keyword=keyword,
            value=value,
            status=int(rm.group(1)),
            object_kind=rm.group(2).strip(),
            description=description,
            models=tuple(_find_models(line, line_number, model_region, RESPONSE_ORIGIN)),
        )

    if keyword == "Param":
        value, description = _split_description(rest)
        tokens = value.split()
        if len(tokens) < 2:
            return None
        return AnnotationField(
            line=line_number,
            kind="param",
            keyword=keyword,
            value=value,
            param_name=tokens[0],
            param_location=tokens[1],
            param_type=tokens[2] if len(tokens) > 2 else None,
            required=_parse_required(tokens[3] if len(tokens) > 3 else None),
            description=description,
            models=tuple(_find_models(line, line_number, value, REQUEST_ORIGIN)),
        )

    if keyword == "Router":
        rm = _ROUTER_RE.match(rest)
        if not rm:
            return None
        methods = tuple(
            m.lower() for m in re.split(r'[\s,]+', rm.group(2) or "") if m
        )
        return AnnotationField(
            line=line_number,
            kind="router",
            keyword=keyword,
            value=rest,
            router_path=rm.group(1),
            router_methods=methods,
        )

    if keyword == "Security":
        sm = _SECURITY_RE.match(rest)
        if not sm:
            return None
        return AnnotationField(
            line=line_number,
            kind="security",
            keyword=keyword,
            value=rest,
            security_scheme=sm.group(1),
        )

    if keyword in _TAG_KEYWORDS:
        return AnnotationField(
            line=line_number,
            kind="tag",
            keyword=keyword,
            value=rest,
        )

    return None


def extract(block: AnnotationBlock, lines: Sequence[str]) -> list[AnnotationField]:
    """Extract fields for every recognized annotation line in ``block``."""
    fields: list[AnnotationField] = []
    last = min(block.end_line, len(lines))
    for line_number in range(max(block.start_line, 1), last + 1):
        f = extract_line(lines[line_number - 1], line_number)
        if f is not None:
            fields.append(f)
    return fields


def analyze(lines: Sequence[str], marker: str = DEFAULT_MARKER) -> list[BlockAnnotations]:
    """Segment ``lines`` and extract the fields of each block."""
    return [
        BlockAnnotations(block=block, fields=tuple(extract(block, lines)))
        for block in segment(lines, marker)
    ]
