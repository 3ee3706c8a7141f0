import pytest

from smplc.analyzer import SemanticAnalyzer
from smplc.codegen import HEADER, CodeGenerator, map_operator, map_type
from smplc.errors import CompilerError
from smplc.lexer import tokenize
from smplc.parser import parse
from smplc.tokens import TokenKind


def _generator(source):
    program = parse(tokenize(source))
    analyzer = SemanticAnalyzer(program)
    assert analyzer.analyze() is False
    return CodeGenerator(program, analyzer)


def _c(source):
    return _generator(source).generate()


def test_map_type_known_names():
    assert map_type("i8") == "int8_t"
    assert map_type("uint") == "unsigned int"
    assert map_type("f64") == "double"


def test_map_type_unknown_raises():
    with pytest.raises(KeyError):
        map_type("str")


def test_map_operator():
    assert map_operator(TokenKind.And) == "&&"
    assert map_operator(TokenKind.Or) == "||"
    assert map_operator(TokenKind.Not) == "!"
    with pytest.raises(KeyError):
        map_operator(TokenKind.Plus)


def test_empty_program_is_header_only():
    assert _c("") == HEADER


def test_main_function_full_output():
    out = _c("defn main() { let x: i32 = 5; print(x); }")
    assert out == HEADER + 'int main() {\n    int32_t x = 5;\n    printf("%d", x);\n}\n'


def test_function_with_params_and_return():
    out = _c("defn add(a: i32, b: i32) -> i32 { return a + b; }")
    assert "int32_t add(int32_t a, int32_t b) {" in out
    assert "    return a + b;\n" in out


def test_void_function():
    out = _c("defn f() { }")
    assert "void f() {" in out


def test_logical_operators_mapped():
    out = _c("let t: bool = true and false;")
    assert "bool t = true && false;" in out


def test_unary_not_and_minus():
    out = _c("let f: bool = not true; let n: i32 = -5;")
    assert "bool f = !true;" in out
    assert "int32_t n = -5;" in out


def test_cast():
    out = _c("let a: i32 = 3; let b: f32 = a as f32;")
    assert "float b = (float) a;" in out


def test_for_range():
    out = _c("defn main() { for i in 0..10 { print(i); } }")
    assert "    for (int i = 0; i < 10; i++) {\n" in out
    assert '        printf("%d", i);\n' in out


def test_if_else_chain_layout():
    out = _c(
        "defn main() { let x: i32 = 1; "
        "if x == 1 { print(1); } else if x == 2 { print(2); } else { print(3); } }"
    )
    assert "    if (x == 1) {" in out
    assert "}\nelse if (x == 2) {" in out
    assert "    else {" in out
    assert out.index("if (x == 1)") < out.index("else if") < out.index("else {")


def test_while_and_assignment_expression():
    out = _c("defn main() { let x: i32 = 0; while x < 3 { x = x + 1; } }")
    assert "    while (x < 3) {\n" in out
    assert "        x = x + 1;\n" in out


def test_conditional_expression():
    out = _c("let y: i32 = 1 if true else 2;")
    assert "int32_t y = true ? 1 : 2;" in out


def test_grouping():
    out = _c("let z: i32 = (1 + 2) * 3;")
    assert "int32_t z = (1 + 2) * 3;" in out


def test_print_string_and_float():
    out = _c('defn main() { print("hi"); print(1.5); }')
    assert 'printf("%s", "hi");' in out
    assert 'printf("%f", 1.5);' in out


def test_user_function_call():
    out = _c(
        "defn add(a: i32, b: i32) -> i32 { return a + b; } "
        "defn main() { let r: i32 = add(1, 2); }"
    )
    assert "int32_t r = add (1, 2);" in out


def test_generate_is_repeatable():
    gen = _generator("defn main() { let x: i32 = 5; }")
    assert gen.generate() == gen.generate()


def test_braces_balanced():
    out = _c("defn main() { let x: i32 = 1; if x == 1 { while x < 2 { x = x + 1; } } }")
    assert out.count("{") == out.count("}")


def test_write_creates_file(tmp_path):
    gen = _generator("defn main() { let x: i32 = 5; }")
    target = tmp_path / "nested" / "out.c"
    text = gen.write(target)
    assert target.read_text() == text
    assert text == gen.generate()


def test_for_over_non_range_raises():
    gen = _generator("let n: i32 = 3; for i in n { }")
    with pytest.raises(CompilerError):
        gen.generate()