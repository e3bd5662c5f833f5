import pytest

from snippetir import tokens
from snippetir.tokens import (
    Delimiter,
    Group,
    Ident,
    Literal,
    Punct,
    Spacing,
    TokenError,
    render,
    to_tokens,
    tokenize,
)


def test_render_macro_call():
    assert render(tokenize('println!("Hello, World!")')) == 'println ! ("Hello, World!")'


def test_render_path_and_statement():
    text = "let client = Client::from_env();"
    assert render(tokenize(text)) == "let client = Client :: from_env () ;"


def test_render_method_chain():
    text = 'client.link_token_create(a, b, c).send().await.unwrap(); println!("{:#?}", response);'
    expected = (
        'client . link_token_create (a , b , c) . send () . await . unwrap () ; '
        'println ! ("{:#?}" , response) ;'
    )
    assert render(tokenize(text)) == expected


def test_joint_spacing():
    assert tokenize("a := 5") == [
        Ident("a"),
        Punct(":", Spacing.JOINT),
        Punct("="),
        Literal("5"),
    ]


def test_group_structure():
    result = tokenize("f(a, b)")
    assert result[0] == Ident("f")
    group = result[1]
    assert isinstance(group, Group)
    assert group.delimiter is Delimiter.PARENTHESIS
    assert group.stream == (Ident("a"), Punct(","), Ident("b"))
    assert str(group) == "(" + group.stream_text() + ")"


def test_empty_brace_group():
    assert str(tokenize("{}")[0]) == "{ }"


def test_nonempty_brace_group():
    assert str(tokenize("{ x }")[0]) == "{ x }"


@pytest.mark.parametrize(
    "text",
    [
        "a := 5",
        "Client::from_env()",
        "if !exists { os.Exit(1); }",
        "fn f<'a>(x: &'a str) -> Vec<u8> { x }",
        "let c = 'x'; let d = '\\n';",
        "map[string]string{\"api\" : \"v1\"}",
    ],
)
def test_render_round_trip(text):
    first = tokenize(text)
    assert tokenize(render(first)) == first


@pytest.mark.parametrize(
    "text",
    ['r#"a "quoted" b"#', 'b"bytes"', '"esc\\"aped"', "'\\n'", "b'x'", "r\"raw\""],
)
def test_single_literals(text):
    assert tokenize(text) == [Literal(text)]


def test_numbers():
    assert tokenize("1.5") == [Literal("1.5")]
    assert tokenize("0xFFu8") == [Literal("0xFFu8")]
    assert tokenize("1..2") == [
        Literal("1"),
        Punct(".", Spacing.JOINT),
        Punct("."),
        Literal("2"),
    ]
    assert tokenize("x.0") == [Ident("x"), Punct("."), Literal("0")]


def test_lifetime_is_joint_quote():
    assert tokenize("'a") == [Punct("'", Spacing.JOINT), Ident("a")]


def test_comments_are_skipped():
    text = "a // line\n b /* outer /* inner */ still */ c"
    assert tokenize(text) == [Ident("a"), Ident("b"), Ident("c")]


def test_raw_identifier():
    assert tokenize("r#type") == [Ident("r#type")]


@pytest.mark.parametrize(
    "text", ["(a]", "(a", "a)", '"abc', 'r#"abc"', "a ` b", "/* open"]
)
def test_tokenize_errors(text):
    with pytest.raises(TokenError):
        tokenize(text)


@pytest.mark.parametrize(
    "delimiter", [Delimiter.PARENTHESIS, Delimiter.BRACE, Delimiter.BRACKET]
)
def test_delimiter_characters_round_trip(delimiter):
    group = tokenize(delimiter.opening() + delimiter.closing())[0]
    assert group.delimiter is delimiter
    assert group.stream == ()


def test_none_delimiter_has_no_characters():
    with pytest.raises(TokenError):
        Delimiter.NONE.opening()
    with pytest.raises(TokenError):
        Delimiter.NONE.closing()


def test_none_group_renders_bare():
    group = Group(Delimiter.NONE, tokenize("a b"))
    assert str(group) == group.stream_text()


def test_invalid_punct():
    with pytest.raises(TokenError):
        Punct("ab")
    with pytest.raises(TokenError):
        Punct("x")


def test_to_tokens_string():
    assert to_tokens("hi") == (Literal('"hi"'),)


def test_to_tokens_string_escapes():
    (literal,) = to_tokens('say "x"\n')
    assert literal.text == '"say \\"x\\"\\n"'
    assert tokenize(render((literal,))) == [literal]


def test_to_tokens_flattens_sequences():
    assert to_tokens([Ident("a"), tokenize("b c")]) == (
        Ident("a"),
        Ident("b"),
        Ident("c"),
    )


def test_to_tokens_bool_and_int():
    assert to_tokens(True) == (Ident("true"),)
    assert to_tokens(7) == (Literal("7"),)


def test_to_tokens_protocol():
    class Named:
        def to_tokens(self):
            return [tokens.Ident("named")]

    assert to_tokens(Named()) == (Ident("named"),)


@pytest.mark.parametrize("value", [object(), b"x", None])
def test_to_tokens_rejects(value):
    with pytest.raises(TypeError):
        to_tokens(value)