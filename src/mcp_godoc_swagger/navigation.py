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

"""Jump from a model reference in an annotation to the type's declaration.

Resolvers are tried in a fixed order chosen once from the configuration:

    index  -> document, project index, text search
    search -> document, text search

Text search is always last and always available.
"""

from __future__ import annotations

import logging
import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from mcp_godoc_swagger.config import GodocConfig
from mcp_godoc_swagger.models import GoFileMetadata, TypeLocation
from mcp_godoc_swagger.project_indexer import ProjectIndexer, read_source

logger = logging.getLogger(__name__)

_GENERIC_ARGS_RE = re.compile(r'\[.*\]')
_TYPE_GROUP_START_RE = re.compile(r'^\s*type\s*\(')

# struct first, then interface, then anything else
_KIND_PRIORITY = {"struct": 0, "interface": 1}


@dataclass(frozen=True)
class Definition:
    """A resolved declaration and the resolver that found it."""

    location: TypeLocation
    resolver: str


def split_qualified_name(name: str) -> tuple[Optional[str], str]:
    """``models.Item[x.Y]`` -> ``("models", "Item")``; ``User`` -> ``(None, "User")``."""
    base = _GENERIC_ARGS_RE.sub("", name)
    if "." in base:
        package, type_name = base.rsplit(".", 1)
        return package, type_name
    return None, base


class SymbolResolver(ABC):
    """Finds where a type is declared."""

    name = "resolver"

    @abstractmethod
    def find(
        self, package: Optional[str], type_name: str, document: GoFileMetadata
    ) -> Optional[TypeLocation]:
        """Return the declaration of ``package.type_name`` or None.

        ``document`` is the file the reference was found in.
        """
        raise NotImplementedError


class DocumentSymbolResolver(SymbolResolver):
    """Looks for the declaration in the current document."""

    name = "document"

    def find(self, package, type_name, document):
        if package and document.package and package != document.package:
            return None
        matches = [t for t in document.types if t.name == type_name]
        if not matches:
            return None
        best = min(matches, key=lambda t: (_KIND_PRIORITY.get(t.kind, 2), t.line_range.start))
        qualified = f"{document.package}.{best.name}" if document.package else best.name
        return TypeLocation(
            qualified_name=qualified,
            file_path=document.source_name,
            line=best.line_range.start,
            kind=best.kind,
        )


class ProjectIndexSymbolResolver(SymbolResolver):
    """Looks the type up in the project index's type table.

    The qualifier may be a Go package name or an import alias of the
    current document.
    """

    name = "index"

    def __init__(self, indexer: ProjectIndexer):
        self.indexer = indexer

    def find(self, package, type_name, document):
        idx = self.indexer.project_index
        if idx is None:
            return None

        candidates = [
            loc
            for key, locs in idx.type_table.items()
            if key.rsplit(".", 1)[-1] == type_name
            for loc in locs
        ]
        if not candidates:
            return None

        if package:
            import_dir = _imported_directory(document, package)
            if import_dir:
                for loc in candidates:
                    if os.path.basename(os.path.dirname(loc.file_path)) == import_dir:
                        return loc
            for loc in candidates:
                if loc.qualified_name == f"{package}.{type_name}":
                    return loc

        if len(candidates) == 1:
            return candidates[0]
        return None


def _imported_directory(document: GoFileMetadata, qualifier: str) -> Optional[str]:
    """Last path segment of the import the document refers to as ``qualifier``."""
    for imp in document.imports:
        if imp.local_name == qualifier:
            return imp.module.rsplit("/", 1)[-1]
    return None


class TextSearchSymbolResolver(SymbolResolver):
    """Greps Go files under the project root for a ``type <Name>`` declaration.

    Only lines starting with ``type`` match, plus members of ``type (...)``
    groups, so mentions inside comments are ignored.
    """

    name = "search"

    def __init__(self, root_path: str, exclude_dirs: tuple[str, ...] = ("vendor", ".git", "node_modules")):
        self.root_path = os.path.abspath(root_path)
        self.exclude_dirs = exclude_dirs

    def find(self, package, type_name, document):
        decl = re.compile(r'^\s*type\s+' + re.escape(type_name) + r'\b')
        group_member = re.compile(r'^\s*' + re.escape(type_name) + r'\b')
        paths = self._candidate_files()
        if package:
            # files in a directory named after the package first
            paths.sort(key=lambda p: p.parent.name != package)

        for path in paths:
            try:
                source = read_source(str(path))
            except OSError as e:
                logger.warning("Cannot search %s: %s", path, e)
                continue
            in_group = False
            for i, line in enumerate(source.split("\n")):
                if _TYPE_GROUP_START_RE.match(line):
                    in_group = True
                    continue
                if in_group and line.strip().startswith(")"):
                    in_group = False
                    continue
                matcher = group_member if in_group else decl
                if matcher.match(line):
                    rel = os.path.relpath(path, self.root_path).replace(os.sep, "/")
                    qualified = f"{package}.{type_name}" if package else type_name
                    return TypeLocation(qualified_name=qualified, file_path=rel, line=i + 1, kind="match")
        return None

    def _candidate_files(self) -> list[Path]:
        root = Path(self.root_path)
        files = []
        for p in sorted(root.rglob("*.go")):
            rel_parts = p.relative_to(root).parts[:-1]
            if any(part in self.exclude_dirs for part in rel_parts):
                continue
            files.append(p)
        return files


class ResolverChain:
    """Tries each resolver in order and returns the first hit."""

    def __init__(self, resolvers: list[SymbolResolver]):
        self.resolvers = resolvers

    @property
    def names(self) -> list[str]:
        return [r.name for r in self.resolvers]

    def find(self, qualified_name: str, document: GoFileMetadata) -> Optional[Definition]:
        package, type_name = split_qualified_name(qualified_name)
        for resolver in self.resolvers:
            location = resolver.find(package, type_name, document)
            if location is not None:
                logger.debug("Resolved %s via %s: %s:%d",
                             qualified_name, resolver.name, location.file_path, location.line)
                return Definition(location=location, resolver=resolver.name)
        logger.debug("No definition found for %s", qualified_name)
        return None


def create_resolver_chain(config: GodocConfig, indexer: ProjectIndexer | None = None) -> ResolverChain:
    """Build the resolver chain for ``config.navigation_style``.

    Raises:
        ValueError: If the navigation style is unknown.
    """
    search = TextSearchSymbolResolver(config.project_root)

    if config.navigation_style == "index":
        resolvers: list[SymbolResolver] = [DocumentSymbolResolver()]
        if indexer is not None:
            resolvers.append(ProjectIndexSymbolResolver(indexer))
        resolvers.append(search)
        return ResolverChain(resolvers)

    if config.navigation_style == "search":
        return ResolverChain([DocumentSymbolResolver(), search])

    raise ValueError(f"Unknown navigation style: {config.navigation_style}")
