import pytest

from snippetir.body import body, body_template, interpolation_binding, pull_interpolation
from snippetir.tokens import TokenError, tokenize


def test_capture_outside():
    assert body("let a = #z", z=1) == "let a = 1"


def test_no_whitespace():
    assert body('request.method("get")') == 'request.method("get")'


def test_go_assignment():
    assert body("a := 5") == "a := 5"


def test_capture_three_vars():
    text = body(
        """
        let a = #z;
        let b = #y;
        let c = #x;
        """,
        x=1,
        y=2,
        z=3,
    )
    assert text == "let a = 3\nlet b = 2\nlet c = 1"


def test_fn_spacing():
    assert body("console.log(response)") == "console.log(response)"


def test_go_assignment_spacing():
    assert body("#ident := #value", ident="a", value=5) == "a := 5"


def test_go_doesnt_wrap_brace():
    inside = '"api" : "v1"'
    result = body("postBody, _ := json.Marshal(map[string]string{#inside})", inside=inside)
    assert result == 'postBody, _ := json.Marshal(map[string]string{"api" : "v1"})'


def test_binding_reuses_index():
    captured = []
    assert interpolation_binding("a", captured, False) == "{0}"
    assert interpolation_binding("b", captured, True) == "{1!r}"
    assert interpolation_binding("a", captured, False) == "{0}"
    assert captured == ["a", "b"]


def test_pull_interpolation_requires_ident():
    with pytest.raises(TokenError):
        pull_interpolation(iter(tokenize("5")), [], False)


def test_body_template_names():
    template, names = body_template(tokenize("f(#a, #b, #a)"))
    assert template == "f({0}, {1}, {0})"
    assert names == ["a", "b"]


def test_missing_value():
    with pytest.raises(KeyError):
        body("let a = #z")