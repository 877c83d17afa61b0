# boba

An interpreter for the Boba programming language. A Boba program (a `.bb`
file) goes through four stages: it is split into tokens, parsed into a
syntax tree, type-checked, and then run.

## Installation

```
pip install .
```

## Running a program

Either form works:

```
boba run hello.bb
boba hello.bb
```

The command prints `Running Boba program: <file>` before it starts and
`Program executed successfully` when it finishes. A missing file, or a lexer,
parser, type or runtime error, is reported on standard error prefixed with
`Error:`, and the command exits with status 1. A file whose name does not end
in `.bb` still runs, but a warning is printed first.

## The language

```
# A single-line comment
### A block comment ###

fun first(a: int, b: int): int {
    return a
}

fun main() {
    x = 40
    y = int("2")
    z = first(x, y)
    output("x is", x, "and y is", y, "first is", z)
    outputf("plain {text}")
}
```

- Literals: integers (with an optional leading `-`), floats, strings,
  `true`, `false` and `null`. Strings are taken as written between the
  quotes; escape sequences are not translated.
- Variables are declared by assignment: `name = expression`.
- Functions are declared with `fun name(param: type, ...): type, ... { ... }`
  and called as `name(arg, ...)`. A function call runs the body until a
  `return` and yields its first value. If a function named `main` exists, its
  body is the program; otherwise the top-level expressions run in order.
- Types are `int`, `float`, `string`, `bool`, `null`, lists `[int]` and maps
  `[string:int]`.
- `int(x)`, `float(x)`, `string(x)` and `bool(x)` convert between types;
  converting a string that does not hold a value of the target type is a
  runtime error.
- `output(...)` prints its arguments separated by spaces; `outputf(s)` prints
  a string with its braces removed.

Before running, the type checker rejects, among other things, calls to
undefined functions, wrong argument counts or types, use of undefined
variables, and functions whose final `return` does not match their declared
return types.

## What it does not do

The tokenizer recognises the keywords `if`, `elseif`, `else`, `loop`, `till`,
`continue`, `break`, `is`, `not`, `input`, `inputf` and `output&`, and the
arithmetic, comparison and logical operators, but the parser does not accept
them: a program that uses them, or list and map literals, fails with a parser
error. There is therefore no branching, looping, arithmetic or reading of
input in a running program.

## Using it from Python

```python
import io
from boba.cli import run_program

buffer = io.StringIO()
run_program('output("hello", 42)', buffer)
print(buffer.getvalue())  # hello 42
```

`run_program` raises the first error it meets as a subclass of
`boba.errors.BobaError`: `LexerError`, `ParserError`, `TypeCheckError` or
`BobaRuntimeError`.

The stages are also available on their own: `boba.lexer.tokenize`,
`boba.parser.parse`, `boba.type_checker.check_types` (which returns a list of
error messages) and `boba.interpreter.interpret`. `boba.interpreter.format_value`
renders a runtime value the way `output` prints it.

## Tests

```
pip install .[test]
pytest
```