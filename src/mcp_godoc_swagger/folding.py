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

"""Fold ranges and hidden-block summaries for annotation blocks."""

from typing import Sequence

from mcp_godoc_swagger.block_segmenter import DEFAULT_MARKER, segment
from mcp_godoc_swagger.models import FoldRange


def fold_ranges(lines: Sequence[str], marker: str = DEFAULT_MARKER) -> list[FoldRange]:
    """One fold per multi-line block; the marker line stays visible."""
    ranges: list[FoldRange] = []
    for block in segment(lines, marker):
        hidden = block.end_line - block.start_line
        if hidden <= 0:
            continue
        ranges.append(FoldRange(
            start_line=block.start_line,
            end_line=block.end_line,
            hidden_lines=hidden,
            summary=f"{hidden} swagger annotations",
        ))
    return ranges


def hidden_summary(fold: FoldRange) -> str:
    """Text shown in place of a hidden block body."""
    return f" [{fold.hidden_lines} swagger annotations hidden]"
