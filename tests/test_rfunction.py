import pytest

from snippetir.rfunction import parse_args2, quote, rfunction
from snippetir.tokens import TokenError, render, tokenize


def test_quote_body():
    s = rfunction('add(a: i32, b: i32) -> i32 { println!("Hello, World!") }')
    assert s.name.value == "add"
    assert render(s.body) == 'println ! ("Hello, World!")'
    assert render(s.ret) == "i32"
    assert len(s.args) == 2
    assert render(s.args[0].ty) == "i32"
    assert render(s.args[1].ty) == "i32"


def test_regression1():
    main = rfunction(
        """main() {
            let client = #client::from_env();
            #(#declarations)*
            let response = client.#operation(#(#fn_args),*)
                .send()
                .await
                .unwrap();
            println!("{:#?}", response);
        }""",
        client=quote("Client"),
        declarations=[quote("let a = 1"), quote("let b = 2"), quote("let c = 3")],
        operation=quote("link_token_create"),
        fn_args=[quote("a"), quote("b"), quote("c")],
    )
    assert render(main.body) == (
        "let client = Client :: from_env () ; let a = 1 let b = 2 let c = 3 "
        "let response = client . link_token_create (a , b , c) . send () . await "
        '. unwrap () ; println ! ("{:#?}" , response) ;'
    )


def test_no_return_type():
    assert rfunction("run() {}").ret == ()


def test_interpolated_arg_type():
    args = parse_args2(tokenize("a: #t"), {"t": quote("u8")})
    assert render(args[0].arg_type) == "u8"


def test_repetition_length_mismatch():
    with pytest.raises(TokenError):
        quote("#(#a #b)*", a=["x", "y"], b=["z"])


def test_missing_value():
    with pytest.raises(KeyError):
        quote("let x = #missing")