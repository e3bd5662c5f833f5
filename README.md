# snippetir

`snippetir` is a small toolkit for code generators. It has three parts:

- **Tokens** (`snippetir.tokens`): a lexer that splits code text into balanced
  token trees (`Ident`, `Punct`, `Literal`, `Group`), `render` to turn token trees
  back into text, and `to_tokens` to turn Python values into tokens.
- **A code model** (`snippetir.mir`): data classes for names, identifiers, function
  arguments, functions, fields, interfaces, new types, classes, files, imports and
  literals, plus a few helpers for building them.
- **Snippet templates** (`snippetir.body`, `snippetir.function`,
  `snippetir.rfunction`): write a piece of target-language code in a compact,
  token-based form with `#name` placeholders, and get back a formatted string, a
  token stream, or a ready-made `mir.Function`.

## Installation

```
pip install snippetir
```

For running the tests:

```
pip install "snippetir[test]"
pytest
```

## Bodies

`snippetir.body.body` tokenizes a snippet, puts in the `#name` values given as
keyword arguments, and lays the result out one statement per line. A `;` ends a
line, blocks that hold statements are indented by four spaces, and blank lines are
dropped.

```python
from snippetir.body import body

body("let a = #z", z=1)
# 'let a = 1'

body("#ident := #value", ident="a", value=5)
# 'a := 5'

body("""
    let a = #z;
    let b = #y;
""", y=2, z=3)
# 'let a = 3\nlet b = 2'
```

`body_template` gives the intermediate format string and the ordered list of names
it refers to. A `#name` with no matching keyword argument raises `KeyError`.

## Functions

`snippetir.function.function` reads a signature (`async`, `pub`, the name or a
`#name` placeholder, arguments with types and optional literal defaults, and an
optional `-> type`) followed by a brace body. It returns a `mir.Function` whose
argument types, return type and body are strings.

```python
from snippetir.function import function

f = function("add(a: int, b: #z) -> int { print(a); a + b; }", z="int")
f.name.value              # 'add'
[a.ty for a in f.args]    # ['int', 'int']
f.ret                     # 'int'
f.body                    # 'print(a)\na + b'
```

Types may be dotted (`requests.PreparedRequest`) or generic (`Dict[str, str]`).
Without `-> type`, `ret` is the empty string.

## Token functions and quoting

`snippetir.rfunction.rfunction` does the same as `function`, but keeps the argument
types, the return type and the body as tuples of tokens instead of formatting them.

```python
from snippetir.rfunction import rfunction
from snippetir.tokens import render

f = rfunction('add(a: i32, b: i32) -> i32 { println!("Hello, World!") }')
render(f.body)   # 'println ! ("Hello, World!")'
render(f.ret)    # 'i32'
```

`snippetir.rfunction.quote` tokenizes a template and substitutes `#name` with the
tokens of the given value (token objects are kept, `mir.Ident` becomes an
identifier, strings become string literals, numbers become numeric literals).
`#( ... ) sep *` repeats its contents once for each item of the list values inside
it, with an optional separator:

```python
from snippetir import mir
from snippetir.rfunction import quote
from snippetir.tokens import render

render(quote("f(#(#args),*)", args=[mir.Ident("a"), mir.Ident("b")]))
# 'f (a , b)'
```

## The code model

```python
from snippetir import mir

mir.import_("plaid.model", "Account", "Item")            # Import with two items
mir.import_("bytes", public=True)                        # re-exported package import
mir.arg("count", "int", "500")                           # FnArg with a default
mir.field("name", "str", mir.Visibility.PUBLIC)
mir.build_struct(["A", "B"])                             # '{A, B}'
mir.build_dict([("a", "1"), ("b", "2")])                 # '{"a": 1, "b": 2}'
mir.Literal.f("hello {name}")                            # f-string literal
mir.doc("")                                              # None
mir.FnArg.empty_variadic()                               # nameless *args marker
```

`ArgIdent` holds either a single name or a tuple of names to unpack; asking an
unpacking name for `force_string()` or `unwrap_ident()` raises `TypeError`.

## What it does not do

The code model is data only: the package has no renderers that turn a `Function`,
`Class` or `File` into the source text of a particular language, and it has no
command-line tool.

## Errors

Malformed templates and unbalanced or unlexable text raise
`snippetir.tokens.TokenError`, a subclass of `ValueError`.