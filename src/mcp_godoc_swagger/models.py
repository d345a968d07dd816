"""Annotation and Go structure models for godoc swagger indexing."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LineRange:
    """A range of lines (1-indexed, inclusive on both ends)."""

    start: int
    end: int


@dataclass(frozen=True)
class AnnotationBlock:
    """A contiguous comment region that documents one API operation."""

    start_line: int  # 1-indexed, the marker line
    end_line: int  # 1-indexed, inclusive

    def contains(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line


@dataclass(frozen=True)
class ModelReference:
    """A ``package.Type`` token found inside an annotation value."""

    line: int  # 1-indexed
    column_start: int  # 0-indexed
    column_end: int  # exclusive: line[column_start:column_end] == qualified_name
    qualified_name: str  # e.g., "models.User"
    nesting_level: int  # unmatched "[" before the token
    origin: str  # "request" (@Param) or "response" (@Success/@Failure)


@dataclass(frozen=True)
class AnnotationField:
    """One recognized annotation line inside a block."""

    line: int
    kind: str  # success, failure, param, router, security, tag
    keyword: str  # e.g., "Success", "Summary"
    value: str  # value region, trailing quoted description removed
    status: int | None = None
    object_kind: str | None = None  # contents of the first {...}
    param_name: str | None = None
    param_location: str | None = None  # path, query, body, header, formData
    param_type: str | None = None
    required: bool | None = None
    router_path: str | None = None
    router_methods: tuple[str, ...] = ()
    security_scheme: str | None = None
    description: str | None = None
    models: tuple[ModelReference, ...] = ()


@dataclass(frozen=True)
class BlockAnnotations:
    """A block together with the fields extracted from it."""

    block: AnnotationBlock
    fields: tuple[AnnotationField, ...]

    @property
    def models(self) -> list[ModelReference]:
        return [ref for f in self.fields for ref in f.models]


@dataclass(frozen=True)
class HighlightSpan:
    """A column span on one line tagged with a highlight group name."""

    line: int
    column_start: int  # 0-indexed
    column_end: int  # exclusive
    group: str  # e.g., "status_code", "model_reference.response.l1"


@dataclass(frozen=True)
class FoldRange:
    """A collapsible region covering one annotation block."""

    start_line: int
    end_line: int
    hidden_lines: int
    summary: str


@dataclass(frozen=True)
class ImportInfo:
    """Metadata about a Go import spec."""

    module: str  # e.g., "github.com/acme/api/models"
    alias: str | None  # explicit alias, "." or "_"; None when unaliased
    line_number: int

    @property
    def local_name(self) -> str:
        """Name the package is referred to by inside the importing file."""
        if self.alias and self.alias not in (".", "_"):
            return self.alias
        return self.module.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class GoTypeInfo:
    """Metadata about a Go type declaration."""

    name: str
    kind: str  # struct, interface, alias, named
    line_range: LineRange
    package: str | None


@dataclass
class GoFileMetadata:
    """Structural metadata for a single Go file."""

    source_name: str
    total_lines: int
    lines: list[str]
    package: str | None = None
    imports: list[ImportInfo] = field(default_factory=list)
    types: list[GoTypeInfo] = field(default_factory=list)
    annotations: list[BlockAnnotations] = field(default_factory=list)


@dataclass(frozen=True)
class TypeLocation:
    """Where a type is declared."""

    qualified_name: str  # "package.Type", or just "Type" outside any package
    file_path: str
    line: int
    kind: str


@dataclass
class ProjectIndex:
    """Annotation and type index for an entire Go project."""

    root_path: str
    files: dict[str, GoFileMetadata] = field(default_factory=dict)

    # "package.Type" -> declarations (several packages may share a name)
    type_table: dict[str, list[TypeLocation]] = field(default_factory=dict)

    # Stats
    total_files: int = 0
    total_lines: int = 0
    total_blocks: int = 0
    total_types: int = 0
    index_build_time_seconds: float = 0.0
