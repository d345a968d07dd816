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

"""Runtime configuration, read once from the environment and passed around."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

NAVIGATION_STYLES = ("index", "search")

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class GodocConfig:
    """Settings threaded into the query functions and core calls."""

    project_root: str = "."
    debug: bool = False
    marker: str = "godoc"
    proximity: int = 10
    navigation_style: str = "index"
    max_file_size_bytes: int = 500_000

    def __post_init__(self) -> None:
        if self.navigation_style not in NAVIGATION_STYLES:
            raise ValueError(
                f"Unknown navigation style '{self.navigation_style}' "
                f"(expected one of: {', '.join(NAVIGATION_STYLES)})"
            )
        if self.proximity < 0:
            raise ValueError("proximity must be >= 0")
        if not self.marker:
            raise ValueError("marker must not be empty")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> GodocConfig:
        """Build a config from PROJECT_ROOT and GODOC_* environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            project_root=env.get("PROJECT_ROOT") or os.getcwd(),
            debug=env.get("GODOC_DEBUG", "").strip().lower() in _TRUE_VALUES,
            marker=env.get("GODOC_MARKER") or "godoc",
            proximity=_int_from_env(env, "GODOC_PROXIMITY", 10),
            navigation_style=env.get("GODOC_NAVIGATION_STYLE") or "index",
            max_file_size_bytes=_int_from_env(env, "GODOC_MAX_FILE_SIZE", 500_000),
        )


def _int_from_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
