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

"""Regex-based Go annotator (best-effort).

Collects what navigation needs from a Go file: the package clause, import
specs, and type declarations (single and grouped), plus the file's godoc
annotation blocks.
"""

import re
from typing import Optional

from mcp_godoc_swagger.block_segmenter import DEFAULT_MARKER
from mcp_godoc_swagger.field_extractor import analyze
from mcp_godoc_swagger.models import (
    GoFileMetadata,
    GoTypeInfo,
    ImportInfo,
    LineRange,
)


def _find_brace_end(lines: list[str], start_line_0: int) -> int:
    """Find the 0-based line where the outermost brace closes, skipping strings/comments."""
    depth = 0
    found_open = False
    in_block_comment = False
    for idx in range(start_line_0, len(lines)):
        line = lines[idx]
        i = 0
        while i < len(line):
            ch = line[i]
            if in_block_comment:
                if line.startswith('*/', i):
                    in_block_comment = False
                    i += 2
                    continue
                i += 1
                continue
            if line.startswith('//', i):
                break
            if line.startswith('/*', i):
                in_block_comment = True
                i += 2
                continue
            if ch in '"`':
                # struct tags are the only strings expected here
                end = line.find(ch, i + 1)
                i = len(line) if end < 0 else end + 1
                continue
            if ch == '{':
                depth += 1
                found_open = True
            elif ch == '}':
                depth -= 1
                if found_open and depth == 0:
                    return idx
            i += 1
    return len(lines) - 1


# ---------------------------------------------------------------------------
# Package and import detection
# ---------------------------------------------------------------------------

_PACKAGE_RE = re.compile(r'^\s*package\s+(\w+)')

_SINGLE_IMPORT_RE = re.compile(
    r'^\s*import\s+'
    r'(?:(\.|_|\w+)\s+)?'   # optional alias
    r'"([^"]+)"'
)

_IMPORT_GROUP_START_RE = re.compile(r'^\s*import\s*\(')

_IMPORT_LINE_RE = re.compile(
    r'^\s*'
    r'(?:(\.|_|\w+)\s+)?'   # optional alias (., _, or name)
    r'"([^"]+)"'
)


def _parse_package(lines: list[str]) -> Optional[str]:
    for line in lines:
        m = _PACKAGE_RE.match(line)
        if m:
            return m.group(1)
    return None


def _parse_imports(lines: list[str]) -> list[ImportInfo]:
    imports: list[ImportInfo] = []
    i = 0
    while i < len(lines):
        stripped = lines[i].strip()

        m = _SINGLE_IMPORT_RE.match(stripped)
        if m:
            imports.append(ImportInfo(module=m.group(2), alias=m.group(1), line_number=i + 1))
            i += 1
            continue

        if _IMPORT_GROUP_START_RE.match(stripped):
            i += 1
            while i < len(lines):
                line = lines[i].strip()
                if line.startswith(')'):
                    break
                im = _IMPORT_LINE_RE.match(line)
                if im:
                    imports.append(ImportInfo(module=im.group(2), alias=im.group(1), line_number=i + 1))
                i += 1

        i += 1
    return imports


# ---------------------------------------------------------------------------
# Type detection
# ---------------------------------------------------------------------------

# type Name[T any] struct {   /   Name struct {   (inside a type group)
_TYPE_SPEC_RE = re.compile(
    r'^(\w+)\s*'
    r'(?:\[[^\]]*\]\s*)?'      # optional type params
    r'(=\s*)?'                 # alias marker
    r'(?:(struct|interface)\b)?'
)

_TYPE_DECL_RE = re.compile(r'^\s*type\s+(.*)$')
_TYPE_GROUP_START_RE = re.compile(r'^\s*type\s*\(')


def _parse_type_spec(
    spec: str, lines: list[str], line_0: int, package: Optional[str]
) -> Optional[tuple[GoTypeInfo, int]]:
    """Parse one type spec; return the type and the 0-based line it ends on."""
    m = _TYPE_SPEC_RE.match(spec.strip())
    if not m or not spec.strip()[len(m.group(1)):].strip():
        return None
    name = m.group(1)
    if m.group(2):
        kind = "alias"
    elif m.group(3):
        kind = m.group(3)
    else:
        kind = "named"

    end_0 = line_0
    if kind in ("struct", "interface") and '{' in spec:
        end_0 = _find_brace_end(lines, line_0)

    return GoTypeInfo(
        name=name,
        kind=kind,
        line_range=LineRange(start=line_0 + 1, end=end_0 + 1),
        package=package,
    ), end_0


def _parse_types(lines: list[str], package: Optional[str]) -> list[GoTypeInfo]:
    types: list[GoTypeInfo] = []
    i = 0
    while i < len(lines):
        line = lines[i]

        if _TYPE_GROUP_START_RE.match(line):
            i += 1
            while i < len(lines):
                stripped = lines[i].strip()
                if stripped.startswith(')'):
                    break
                if stripped and not stripped.startswith('//'):
                    parsed = _parse_type_spec(stripped, lines, i, package)
                    if parsed:
                        types.append(parsed[0])
                        i = parsed[1]
                i += 1
            i += 1
            continue

        tm = _TYPE_DECL_RE.match(line)
        if tm:
            parsed = _parse_type_spec(tm.group(1), lines, i, package)
            if parsed:
                types.append(parsed[0])
                i = parsed[1]

        i += 1
    return types


# ---------------------------------------------------------------------------
# Main annotator
# ---------------------------------------------------------------------------

def annotate_go(
    source: str, source_name: str = "<source>", marker: str = DEFAULT_MARKER
) -> GoFileMetadata:
    """Parse Go source and extract structural metadata using regex.

    Detects:
      - the package clause
      - import statements (single and grouped)
      - type declarations: struct, interface, alias (type A = B) and
        named types (type A B), including members of type (...) groups
      - godoc swagger annotation blocks and their fields
    """
    lines = source.split("\n")
    package = _parse_package(lines)

    return GoFileMetadata(
        source_name=source_name,
        total_lines=len(lines),
        lines=lines,
        package=package,
        imports=_parse_imports(lines),
        types=_parse_types(lines, package),
        annotations=analyze(lines, marker),
    )
