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

"""Map a (line, column) position to the model reference under or near it."""

from typing import Iterable, Optional

from mcp_godoc_swagger.models import BlockAnnotations, ModelReference

DEFAULT_PROXIMITY = 10


def column_distance(ref: ModelReference, column: int) -> int:
    """Distance from ``column`` to the nearest character of ``ref`` (0 inside)."""
    if column < ref.column_start:
        return ref.column_start - column
    if column >= ref.column_end:
        return column - (ref.column_end - 1)
    return 0


def resolve(
    annotated: Iterable[BlockAnnotations],
    row: int,
    column: int,
    proximity: int = DEFAULT_PROXIMITY,
) -> Optional[ModelReference]:
    """Return the reference at ``row`` (1-indexed) and ``column`` (0-indexed).

    An exact hit wins immediately. Otherwise the nearest reference on the
    same row is returned when it is at most ``proximity`` columns away.
    """
    closest: Optional[ModelReference] = None
    min_distance = proximity + 1

    for entry in annotated:
        if not entry.block.contains(row):
            continue
        for ref in entry.models:
            if ref.line != row:
                continue
            distance = column_distance(ref, column)
            if distance == 0:
                return ref
            if distance < min_distance:
                min_distance = distance
                closest = ref

    return closest
