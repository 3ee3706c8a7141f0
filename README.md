# smplc

`smplc` compiles programs in Smpl, a small statically typed language, to C
source. It then runs `gcc` on that C source to build an executable.

## Installation

```
pip install .
```

You need `gcc` on your `PATH` to build executables.

## Usage

```
smplc program.smpl            # builds an executable named "exe"
smplc program.smpl myprogram  # builds an executable named "myprogram"
```

The command works in this order:

1. It reads the source file. If the file cannot be opened, it prints
   `Could not open file` and goes on with an empty program.
2. It tokenizes and parses the source.
3. It checks the types.
4. If no errors were found, it writes the generated C to
   `../c_code/generated.c`, relative to the current directory. It creates the
   directory if needed.
5. It runs `gcc ../c_code/generated.c -o <output>`.

Diagnostics are printed as `line [N]: message`.

The command returns exit status 1 in two cases: when no source file is given,
and when tokenizing fails. In every other case it returns 0, even if parsing,
type checking or `gcc` reported a failure. When type checking fails, no new C
file is written. `gcc` still runs on whatever file is already at that path.

## The language

```
defn add(a: int, b: int) -> int {
    return a + b;
}

defn main() {
    let x: int = add(1, 2);
    for i in 0..10 {
        print(i);
    }
    if x > 2 {
        print("big");
    } else {
        print("small");
    }
    let y: f32 = 1.5 if x == 3 else 2.5;
    let z: int = y as int;
}
```

### Types

`i8 i16 i32 i64 int u8 u16 u32 u64 uint f32 f64 bool char str`

### Statements

- `let name: type = expr;`
- `defn name(params) -> type { ... }`
  - `main` always returns `int`.
  - A function without `->` returns nothing.
- `return`
- `if` / `else if` / `else`
- `while`
- `for x in a..b`
- blocks and expression statements

### Operators

- arithmetic, comparison, bitwise and assignment operators
- `and`, `or`, `not`, which can also be written `&&`, `||` and `!`
- casts with `as`
- conditional expressions: `value if condition else other`

### Other features

- The built-in `print` takes one integer, float or string expression.
- Line comments start with `//`.
- Underscores in number literals are ignored.

### Known limitations

- A number literal assigned directly to a variable of type `int` is always
  reported as `An overflow will occur here`. Use a sized type such as `i32`,
  or assign from an expression.
- Character literals are not supported.
- A lone `.` produces no token.
- `char` and `str` have no C mapping. Declaring variables or parameters of
  these types fails when the C code is generated.
- `for` loops only iterate over ranges written as `a..b`.

## Using it as a library

```python
from smplc.lexer import tokenize
from smplc.parser import parse
from smplc.analyzer import SemanticAnalyzer
from smplc.codegen import CodeGenerator

program = parse(tokenize("defn main() { let x: i32 = 1; }"))
analyzer = SemanticAnalyzer(program)
if not analyzer.analyze():          # True means errors were reported
    print(CodeGenerator(program, analyzer).generate())
```

### Modules

- `smplc.lexer`
  - `tokenize(source)` and `Lexer(source).lex()` return `Token`s, ending with
    an `Eof` token.
  - They raise `LexicalError` on an unexpected character or an unterminated
    string.
- `smplc.parser`
  - `parse(tokens)` and `Parser(tokens).parse()` return a list of statement
    nodes from `smplc.nodes`.
  - Syntax errors are printed, and parsing resumes at the next statement.
- `smplc.analyzer`
  - `SemanticAnalyzer(program).analyze()` checks scopes and types.
  - It records the resolved types on the expression nodes.
  - It prints each error and returns `True` if there were any.
- `smplc.codegen`
  - `CodeGenerator(program, analyzer).generate()` returns the C source.
  - `.write(path)` also saves it to `path`.
  - `map_type` and `map_operator` give the C spellings of type names and of
    `and`, `or` and `not`.
- `smplc.typecheck`
  - `SmplType` and the compatibility rules: `are_assign_compatible`,
    `are_binary_compatible`, `is_castable`, `fits_in_type`, `str_to_type`.
  - Built-in function lookup: `is_builtin`, `get_builtin`.
- `smplc.errors`
  - `CompilerError` and its subclasses `SmplSyntaxError`, `LexicalError` and
    `SmplTypeError`. Each carries `message` and `line_number`.
  - `report_error(line, msg)`.
- `smplc.cli`
  - `main(argv)`, `read_source`, `generate_c`, `compile_c_output`.