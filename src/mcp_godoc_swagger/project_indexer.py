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

"""Project-wide Go indexer.

Walks a project directory, annotates each Go file, and builds a type table
keyed by ``package.Type`` for model-reference navigation.
"""

import fnmatch
import logging
import os
import time
from pathlib import Path

from mcp_godoc_swagger.block_segmenter import DEFAULT_MARKER
from mcp_godoc_swagger.go_annotator import annotate_go
from mcp_godoc_swagger.models import GoFileMetadata, ProjectIndex, TypeLocation

logger = logging.getLogger(__name__)


def read_source(abs_path: str) -> str:
    """Read a file as text, trying UTF-8 first then latin-1 as fallback."""
    try:
        with open(abs_path, "r", encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError:
        with open(abs_path, "r", encoding="latin-1") as f:
            return f.read()


class ProjectIndexer:
    """Indexes the Go files of a project for annotation queries and navigation."""

    def __init__(
        self,
        root_path: str,
        include_patterns: list[str] | None = None,
        exclude_patterns: list[str] | None = None,
        max_file_size_bytes: int = 500_000,
        marker: str = DEFAULT_MARKER,
    ):
        self.root_path = os.path.abspath(root_path)
        self.include_patterns = include_patterns or ["**/*.go"]
        self.exclude_patterns = exclude_patterns or [
            "**/vendor/**",
            "**/node_modules/**",
            "**/.git/**",
            "**/testdata/**",
        ]
        self.max_file_size_bytes = max_file_size_bytes
        self.marker = marker
        self._project_index: ProjectIndex | None = None

    @property
    def project_index(self) -> ProjectIndex | None:
        return self._project_index

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def index(self) -> ProjectIndex:
        """Walk the project, annotate all Go files, build the type table.

        Returns:
            ProjectIndex with all files indexed.
        """
        start_time = time.monotonic()

        file_paths = self.discover_files()
        logger.info("Discovered %d files in %s", len(file_paths), self.root_path)

        files: dict[str, GoFileMetadata] = {}
        for fpath in file_paths:
            rel_path = self._relative(fpath)
            try:
                source = read_source(fpath)
            except OSError as e:
                logger.warning("Skipping %s: %s", rel_path, e)
                continue
            files[rel_path] = annotate_go(source, source_name=rel_path, marker=self.marker)

        self._project_index = ProjectIndex(root_path=self.root_path, files=files)
        self._refresh_totals()
        self._project_index.index_build_time_seconds = time.monotonic() - start_time

        idx = self._project_index
        logger.info(
            "Indexed %d files (%d lines, %d godoc blocks, %d types) in %.2fs",
            idx.total_files,
            idx.total_lines,
            idx.total_blocks,
            idx.total_types,
            idx.index_build_time_seconds,
        )
        return idx

    def reindex_file(self, file_path: str) -> None:
        """Re-index a single file. Updates the existing ProjectIndex in place.

        A file that can no longer be read is dropped from the index.

        Args:
            file_path: Path to the file (absolute or relative to root_path).
        """
        if self._project_index is None:
            raise RuntimeError("Cannot reindex before initial index() call.")

        abs_path = (
            os.path.abspath(file_path)
            if os.path.isabs(file_path)
            else os.path.join(self.root_path, file_path)
        )
        rel_path = self._relative(abs_path)
        idx = self._project_index

        try:
            source = read_source(abs_path)
        except OSError as e:
            logger.warning("Cannot reindex %s: %s", rel_path, e)
            idx.files.pop(rel_path, None)
        else:
            idx.files[rel_path] = annotate_go(source, source_name=rel_path, marker=self.marker)

        self._refresh_totals()

    def remove_file(self, file_path: str) -> None:
        """Drop a file from the index."""
        if self._project_index is None:
            raise RuntimeError("Cannot remove files before initial index() call.")
        self._project_index.files.pop(file_path, None)
        self._refresh_totals()

    # ------------------------------------------------------------------
    # File discovery
    # ------------------------------------------------------------------

    def discover_files(self) -> list[str]:
        """Absolute paths matching include patterns, minus excluded and oversized files."""
        root = Path(self.root_path)
        matched: set[str] = set()

        for pattern in self.include_patterns:
            for p in root.glob(pattern):
                if not p.is_file():
                    continue
                abs_str = str(p)
                rel_str = self._relative(abs_str)
                if self.is_excluded(rel_str):
                    continue
                try:
                    size = p.stat().st_size
                except OSError:
                    continue
                if size > self.max_file_size_bytes:
                    logger.debug("Skipping %s (size %d > %d)", rel_str, size, self.max_file_size_bytes)
                    continue
                matched.add(abs_str)

        return sorted(matched)

    def is_excluded(self, rel_path: str) -> bool:
        """Check if a relative path matches any exclude pattern."""
        normalized = rel_path.replace(os.sep, "/")
        parts = normalized.split("/")
        for pattern in self.exclude_patterns:
            if fnmatch.fnmatch(normalized, pattern):
                return True
            # "**/vendor/**" also excludes a top-level vendor/ directory
            dir_name = pattern.replace("**/", "").replace("/**", "").strip("/")
            if dir_name in parts[:-1]:
                return True
        return False

    def _relative(self, abs_path: str) -> str:
        return os.path.relpath(abs_path, self.root_path).replace(os.sep, "/")

    # ------------------------------------------------------------------
    # Type table and stats
    # ------------------------------------------------------------------

    @staticmethod
    def build_type_table(files: dict[str, GoFileMetadata]) -> dict[str, list[TypeLocation]]:
        """Map "package.Type" (or "Type" for package-less files) to declarations."""
        table: dict[str, list[TypeLocation]] = {}
        for file_path in sorted(files):
            meta = files[file_path]
            for t in meta.types:
                key = f"{t.package}.{t.name}" if t.package else t.name
                table.setdefault(key, []).append(TypeLocation(
                    qualified_name=key,
                    file_path=file_path,
                    line=t.line_range.start,
                    kind=t.kind,
                ))
        return table

    def _refresh_totals(self) -> None:
        idx = self._project_index
        if idx is None:
            return
        idx.type_table = self.build_type_table(idx.files)
        idx.total_files = len(idx.files)
        idx.total_lines = sum(m.total_lines for m in idx.files.values())
        idx.total_blocks = sum(len(m.annotations) for m in idx.files.values())
        idx.total_types = sum(len(m.types) for m in idx.files.values())
