"""Tests for the regex-based Go annotator."""

import textwrap

from mcp_godoc_swagger.go_annotator import annotate_go


class TestGoPackage:
    def test_package_clause(self):
        meta = annotate_go("// Package models holds DTOs.\npackage models\n")
        assert meta.package == "models"

    def test_no_package(self):
        assert annotate_go("type X struct{}").package is None


class TestGoImports:
    def test_single_import(self):
        meta = annotate_go('package main\n\nimport "fmt"\n')
        assert len(meta.imports) == 1
        imp = meta.imports[0]
        assert imp.module == "fmt"
        assert imp.alias is None
        assert imp.line_number == 3
        assert imp.local_name == "fmt"

    def test_grouped_imports_with_aliases(self):
        src = textwrap.dedent("""\
        package handlers

        import (
            "net/http"
            dto "github.com/acme/api/internal/models"
            _ "github.com/acme/api/docs"
            . "github.com/acme/api/helpers"
        )
        """)
        meta = annotate_go(src)
        assert [i.module for i in meta.imports] == [
            "net/http",
            "github.com/acme/api/internal/models",
            "github.com/acme/api/docs",
            "github.com/acme/api/helpers",
        ]
        assert [i.local_name for i in meta.imports] == ["http", "dto", "docs", "helpers"]
        assert meta.imports[1].alias == "dto"
        assert meta.imports[1].line_number == 5


class TestGoTypes:
    def test_struct(self):
        src = textwrap.dedent("""\
        package models

        type User struct {
            ID   int    `json:"id"`
            Name string `json:"name"`
        }
        """)
        meta = annotate_go(src)
        assert len(meta.types) == 1
        t = meta.types[0]
        assert t.name == "User"
        assert t.kind == "struct"
        assert t.package == "models"
        assert t.line_range.start == 3
        assert t.line_range.end == 6

    def test_interface(self):
        src = "type Store interface {\n\tGet(id int) error\n}"
        t = annotate_go(src).types[0]
        assert t.kind == "interface"
        assert t.line_range.end == 3

    def test_generic_struct(self):
        src = "type APIResponse[T any] struct {\n\tData T\n}"
        t = annotate_go(src).types[0]
        assert t.name == "APIResponse"
        assert t.kind == "struct"

    def test_alias_and_named(self):
        src = "type ID = int64\ntype Status string\n"
        types = annotate_go(src).types
        assert [(t.name, t.kind) for t in types] == [("ID", "alias"), ("Status", "named")]

    def test_type_group(self):
        src = textwrap.dedent("""\
        package models

        type (
            // Item is an item.
            Item struct {
                Name string
            }
            ItemID string
        )

        type After struct{}
        """)
        types = annotate_go(src).types
        assert [(t.name, t.kind, t.line_range.start) for t in types] == [
            ("Item", "struct", 5),
            ("ItemID", "named", 8),
            ("After", "struct", 11),
        ]

    def test_braces_in_struct_tags_ignored(self):
        src = textwrap.dedent("""\
        type Cfg struct {
            Path string `default:"{home}"`
        }
        type Next struct{}
        """)
        types = annotate_go(src).types
        assert types[0].line_range.end == 3
        assert types[1].name == "Next"


class TestGoAnnotations:
    def test_blocks_attached(self):
        src = textwrap.dedent("""\
        package handlers

        // GetUser godoc
        // @Summary Get a user
        // @Success 200 {object} models.User
        // @Router /users/{id} [get]
        func GetUser(c *gin.Context) {}
        """)
        meta = annotate_go(src, source_name="handlers/user.go")
        assert meta.source_name == "handlers/user.go"
        assert len(meta.annotations) == 1
        assert meta.annotations[0].block.start_line == 3
        assert [r.qualified_name for r in meta.annotations[0].models] == ["models.User"]

    def test_custom_marker(self):
        src = "// GetUser swagger\n// @Summary x\nfunc GetUser() {}"
        assert annotate_go(src).annotations == []
        assert len(annotate_go(src, marker="swagger").annotations) == 1

    def test_total_lines(self):
        assert annotate_go("a\nb\nc").total_lines == 3
