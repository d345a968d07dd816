"""Shared fixtures: a small Go API project on disk."""

import textwrap

import pytest

HANDLERS_SOURCE = textwrap.dedent("""\
    package handlers

    import (
        "net/http"

        dto "example.com/api/internal/models"
        "example.com/api/internal/responses"
    )

    // UpdateRequest is the payload for UpdateUser.
    type UpdateRequest struct {
        Name string `json:"name"`
    }

    // GetUser godoc
    // @Summary Get a user
    // @Param id path int true "User ID"
    // @Success 200 {object} responses.APIResponse[dto.User]
    // @Failure 404 {object} models.ErrorResponse "Not found"
    // @Router /users/{id} [get]
    func GetUser(w http.ResponseWriter, r *http.Request) {}

    // UpdateUser godoc
    // @Summary Update a user
    // @Param request body handlers.UpdateRequest true "Payload"
    // @Success 200 {object} dto.Widget
    // @Security ApiKeyAuth
    // @Router /users/{id} [put]
    func UpdateUser(w http.ResponseWriter, r *http.Request) {}
    """)

HANDLERS_LINES = HANDLERS_SOURCE.split("\n")


def column_of(line_number: int, text: str) -> int:
    """0-indexed column of ``text`` on a 1-indexed line of HANDLERS_SOURCE."""
    column = HANDLERS_LINES[line_number - 1].find(text)
    assert column >= 0, f"{text!r} not on line {line_number}"
    return column


@pytest.fixture
def go_project(tmp_path):
    """Create a Go project with handlers, models and an excluded vendor dir.

    Structure:
        api/
            go.mod
            internal/
                handlers/user.go      (godoc blocks, UpdateRequest)
                models/user.go        (User, ErrorResponse)
                models/item.go        (Item)
                responses/api.go      (APIResponse[T])
                catalog/item.go       (Item, same name as models.Item)
            legacy/old.go             (Widget)
            vendor/lib/lib.go         (excluded)
    """
    root = tmp_path / "api"
    root.mkdir()
    (root / "go.mod").write_text("module example.com/api\n\ngo 1.21\n")

    internal = root / "internal"
    for sub in ("handlers", "models", "responses", "catalog"):
        (internal / sub).mkdir(parents=True)

    (internal / "handlers" / "user.go").write_text(HANDLERS_SOURCE)

    (internal / "models" / "user.go").write_text(textwrap.dedent("""\
        package models

        // User is an API user.
        type User struct {
            ID   int    `json:"id"`
            Name string `json:"name"`
        }

        type ErrorResponse struct {
            Message string `json:"message"`
        }
        """))

    (internal / "models" / "item.go").write_text("package models\n\ntype Item struct{}\n")
    (internal / "catalog" / "item.go").write_text("package catalog\n\ntype Item struct{}\n")

    (internal / "responses" / "api.go").write_text(textwrap.dedent("""\
        package responses

        type APIResponse[T any] struct {
            Data T `json:"data"`
        }
        """))

    (root / "legacy").mkdir()
    (root / "legacy" / "old.go").write_text("package legacy\n\ntype Widget struct{}\n")

    (root / "vendor" / "lib").mkdir(parents=True)
    (root / "vendor" / "lib" / "lib.go").write_text("package lib\n\ntype Vendored struct{}\n")

    return root
