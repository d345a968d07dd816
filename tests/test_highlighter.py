"""Tests for annotation highlight spans."""

from mcp_godoc_swagger.highlighter import highlight, model_group

SOURCE = [
    "package handlers",                                                     # 1
    "",                                                                     # 2
    "// UpdateClient godoc",                                                # 3
    "// @Summary Update a client",                                          # 4
    "// @Param id path int true \"Client ID\"",                             # 5
    "// @Param request body requests.Update[client.Config] true \"data\"",   # 6
    "// @Success 200 {object} responses.APIResponse[models.Client]",        # 7
    "// @Failure 404 {object} models.ErrorResponse \"Not found\"",          # 8
    "// @Security ApiKeyAuth",                                              # 9
    "// @Router /clients/{id} [put]",                                       # 10
    "func UpdateClient() {}",                                               # 11
    "// outside models.Nope",                                               # 12
]


def _texts(line_number: int) -> dict[str, list[str]]:
    """Group name -> highlighted substrings on one line."""
    line = SOURCE[line_number - 1]
    result: dict[str, list[str]] = {}
    for span in highlight(SOURCE):
        if span.line == line_number:
            result.setdefault(span.group, []).append(line[span.column_start:span.column_end])
    return result


class TestModelGroup:
    def test_levels(self):
        assert model_group("response", 0) == "model_reference.response.l0"
        assert model_group("request", 2) == "model_reference.request.l2"

    def test_level_capped(self):
        assert model_group("response", 7) == "model_reference.response.l3"


class TestHighlight:
    def test_marker_line(self):
        assert _texts(3) == {"godoc_line": ["// UpdateClient godoc"]}

    def test_comment_token_on_every_other_line(self):
        for n in range(4, 11):
            assert _texts(n)["comment"] == ["//"]

    def test_tag_keyword(self):
        texts = _texts(4)
        assert texts["keyword.tag"] == ["@Summary"]

    def test_param_parts(self):
        texts = _texts(5)
        assert texts["keyword.param"] == ["@Param"]
        assert texts["param_name"] == ["id"]
        assert texts["param_location"] == ["path"]
        assert texts["param_type"] == ["int"]
        assert texts["param_required"] == ["true"]
        assert texts["description_text"] == ['"Client ID"']

    def test_request_models(self):
        texts = _texts(6)
        assert texts["model_reference.request.l0"] == ["requests.Update"]
        assert texts["model_reference.request.l1"] == ["client.Config"]

    def test_response_parts(self):
        texts = _texts(7)
        assert texts["keyword.success"] == ["@Success"]
        assert texts["status_code"] == ["200"]
        assert texts["type_keyword"] == ["{object}"]
        assert texts["model_reference.response.l0"] == ["responses.APIResponse"]
        assert texts["model_reference.response.l1"] == ["models.Client"]

    def test_failure_description(self):
        texts = _texts(8)
        assert texts["keyword.failure"] == ["@Failure"]
        assert texts["description_text"] == ['"Not found"']

    def test_security(self):
        texts = _texts(9)
        assert texts["keyword.security"] == ["@Security"]
        assert texts["security_scheme"] == ["ApiKeyAuth"]

    def test_router(self):
        texts = _texts(10)
        assert texts["keyword.router"] == ["@Router"]
        assert texts["router_path"] == ["/clients/{id}"]
        assert texts["router_path_var"] == ["{id}"]
        assert texts["router_method"] == ["[put]"]

    def test_nothing_outside_blocks(self):
        assert _texts(1) == {}
        assert _texts(11) == {}
        assert _texts(12) == {}

    def test_sorted_by_position(self):
        spans = highlight(SOURCE)
        keys = [(s.line, s.column_start) for s in spans]
        assert keys == sorted(keys)

    def test_no_blocks(self):
        assert highlight(["package main", "func main() {}"]) == []
