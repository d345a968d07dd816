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

"""Locate godoc swagger annotation blocks in Go source.

A block starts at a ``//`` comment line containing the marker (``godoc`` by
default), absorbs every following comment line, and ends at the first
non-comment line or the end of the document. Blocks without a single
``// @Keyword`` line are dropped.
"""

import re
from typing import Optional, Sequence

from mcp_godoc_swagger.models import AnnotationBlock

DEFAULT_MARKER = "godoc"

_COMMENT_RE = re.compile(r'^\s*//')
_ANNOTATION_RE = re.compile(r'^\s*//\s*@(\w+)')


def is_comment(line: str) -> bool:
    return _COMMENT_RE.match(line) is not None


def is_annotation(line: str) -> bool:
    """True for ``// @Word`` lines."""
    return _ANNOTATION_RE.match(line) is not None


def is_marker(line: str, marker: str = DEFAULT_MARKER) -> bool:
    """True for a comment line with the marker anywhere after ``//``."""
    m = _COMMENT_RE.match(line)
    return m is not None and marker in line[m.end():]


def segment(lines: Sequence[str], marker: str = DEFAULT_MARKER) -> list[AnnotationBlock]:
    """Return the annotation blocks in ``lines`` in ascending order.

    Single forward pass. A marker seen while a block is open is absorbed
    into that block.
    """
    blocks: list[AnnotationBlock] = []
    start: Optional[int] = None
    end = 0
    has_annotation = False

    for i, line in enumerate(lines, start=1):
        if not is_comment(line):
            if start is not None and has_annotation:
                blocks.append(AnnotationBlock(start_line=start, end_line=end))
            start = None
            has_annotation = False
            continue

        if start is None:
            if is_marker(line, marker):
                start = end = i
                has_annotation = is_annotation(line)
            continue

        end = i
        if is_annotation(line):
            has_annotation = True

    if start is not None and has_annotation:
        blocks.append(AnnotationBlock(start_line=start, end_line=end))

    return blocks


def find_block_at(
    lines: Sequence[str], line: int, marker: str = DEFAULT_MARKER
) -> Optional[AnnotationBlock]:
    """Return the block covering the 1-indexed ``line``, if any."""
    for block in segment(lines, marker):
        if block.contains(line):
            return block
        if block.start_line > line:
            break
    return None
