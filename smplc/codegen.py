"""Emits C source text for an analyzed program."""

from __future__ import annotations

from pathlib import Path

from smplc.analyzer import SemanticAnalyzer
from smplc.errors import CompilerError
from smplc.nodes import (
    AssignmentNode,
    BinaryExpr,
    BlockNode,
    BooleanLiteral,
    CondExprNode,
    DefnNode,
    ExprNode,
    ExprStmt,
    ForNode,
    FuncCallNode,
    GroupingExpr,
    IdentifierNode,
    IfNode,
    NumLitNode,
    ParamNode,
    ReturnNode,
    StmtNode,
    StringLiteral,
    TypeNode,
    UnaryNode,
    WhileNode,
)
from smplc.tokens import TokenKind
from smplc.typecheck import BuiltinKind, SmplType, get_builtin, is_floating, is_integer

HEADER = "#include <stdio.h>\n#include <stdbool.h>\n#include <stdint.h>\n\n"
INDENT = "    "

_C_TYPES: dict[str, str] = {
    "i8": "int8_t",
    "i16": "int16_t",
    "i32": "int32_t",
    "i64": "int64_t",
    "int": "int",
    "u8": "uint8_t",
    "u16": "uint16_t",
    "u32": "uint32_t",
    "u64": "uint64_t",
    "uint": "unsigned int",
    "f32": "float",
    "f64": "double",
    "bool": "bool",
}

_C_OPERATORS: dict[TokenKind, str] = {
    TokenKind.Not: "!",
    TokenKind.And: "&&",
    TokenKind.Or: "||",
}


def map_type(smpl_type: str) -> str:
    """Return the C spelling of a language type name; KeyError if it has none."""
    try:
        return _C_TYPES[smpl_type]
    except KeyError:
        raise KeyError(f"no C type for {smpl_type!r}") from None


def map_operator(op_kind: TokenKind) -> str:
    """Return the C spelling of a logical operator; KeyError if it has none."""
    try:
        return _C_OPERATORS[op_kind]
    except KeyError:
        raise KeyError(f"no C operator for {op_kind.name}") from None


class CodeGenerator:
    """Walks the syntax tree and produces a C translation unit."""

    def __init__(self, program: list[StmtNode], analyzer: SemanticAnalyzer) -> None:
        self.program = program
        self.analyzer = analyzer
        self._parts: list[str] = []
        self._indent_level = 0

    def generate(self) -> str:
        """Return the C source for the whole program."""
        self._parts = [HEADER]
        self._indent_level = 0
        for stmt in self.program:
            self._statement(stmt)
        return "".join(self._parts)

    def write(self, path: str | Path) -> str:
        """Generate the C source, store it at ``path`` and return it."""
        text = self.generate()
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text)
        return text

    # Output helpers

    def _emit(self, text: str) -> None:
        self._parts.append(text)

    def _indent(self) -> None:
        self._emit(INDENT * self._indent_level)

    # Statements

    def _statement(self, stmt: StmtNode) -> None:
        match stmt:
            case AssignmentNode():
                self._indent()
                self._emit(
                    f"{map_type(stmt.var_type.lexeme)} {stmt.variable.lexeme} = "
                    f"{self._expression(stmt.right)};\n"
                )
            case BlockNode():
                self._block(stmt)
            case ExprStmt():
                self._indent()
                self._emit(f"{self._expression(stmt.expr)};\n")
            case DefnNode():
                self._fndecl(stmt)
            case ForNode():
                self._for(stmt)
            case IfNode():
                self._if(stmt)
            case ParamNode():
                self._emit(self._params(stmt))
            case ReturnNode():
                self._indent()
                if stmt.return_expr is None:
                    self._emit("return;\n")
                else:
                    self._emit(f"return {self._expression(stmt.return_expr)};\n")
            case WhileNode():
                self._indent()
                self._emit(f"while ({self._expression(stmt.condition)}) ")
                self._statement(stmt.block)
            case _:
                raise CompilerError("Unknown statement", stmt.line)

    def _block(self, block: BlockNode) -> None:
        self._emit("{\n")
        self._indent_level += 1
        for stmt in block.statements:
            self._statement(stmt)
        self._indent_level -= 1
        self._indent()
        self._emit("}\n")

    def _fndecl(self, defn: DefnNode) -> None:
        self._indent()
        if defn.identifier.lexeme == "main":
            return_type = "int"
        elif defn.return_type is not None:
            return_type = map_type(defn.return_type.lexeme)
        else:
            return_type = "void"
        self._emit(f"{return_type} {defn.identifier.lexeme}")
        self._statement(defn.params)
        self._emit(" ")
        self._statement(defn.block)

    @staticmethod
    def _params(param_node: ParamNode) -> str:
        params = ", ".join(
            f"{map_type(type_.lexeme)} {name.lexeme}" for name, type_ in param_node.params
        )
        return f"({params})"

    def _for(self, for_node: ForNode) -> None:
        # Only range expressions can be iterated.
        range_op = for_node.iterator
        if not isinstance(range_op, BinaryExpr):
            raise CompilerError("A for loop can only iterate over a range", for_node.line)
        var = for_node.bind_var.lexeme
        self._indent()
        self._emit(
            f"for (int {var} = {self._expression(range_op.left)}; "
            f"{var} < {self._expression(range_op.right)}; {var}++) "
        )
        self._statement(for_node.block)

    def _if(self, if_node: IfNode) -> None:
        for position, branch in enumerate(if_node.branches):
            if branch.condition is None:
                self._indent()
                self._emit("else ")
            elif position == 0:
                self._indent()
                self._emit(f"if ({self._expression(branch.condition)}) ")
            else:
                self._emit(f"else if ({self._expression(branch.condition)}) ")
            self._statement(branch.block)

    # Expressions

    def _expression(self, expr: ExprNode) -> str:
        match expr:
            case BinaryExpr():
                return self._binary(expr)
            case BooleanLiteral():
                return expr.literal.lexeme
            case CondExprNode():
                return (
                    f"{self._expression(expr.if_expr)} ? {self._expression(expr.if_val)} : "
                    f"{self._expression(expr.else_val)}"
                )
            case FuncCallNode():
                return self._fncall(expr)
            case GroupingExpr():
                return f"({self._expression(expr.expr)})"
            case IdentifierNode():
                return expr.identifier.lexeme
            case NumLitNode():
                return expr.literal.lexeme
            case StringLiteral():
                return expr.literal.lexeme
            case TypeNode():
                return expr.type_token.lexeme
            case UnaryNode():
                op = "!" if expr.op.kind == TokenKind.Not else expr.op.lexeme
                return f"{op}{self._expression(expr.right)}"
        raise CompilerError("Unknown expression", expr.line)

    def _binary(self, binary: BinaryExpr) -> str:
        kind = binary.op.kind
        op = binary.op.lexeme
        if kind in (TokenKind.And, TokenKind.Or):
            op = map_operator(kind)
        elif kind == TokenKind.As:
            if not isinstance(binary.right, TypeNode):
                raise CompilerError("Expected a type after 'as'", binary.line)
            target = map_type(binary.right.type_token.lexeme)
            return f"({target}) {self._expression(binary.left)}"
        return f"{self._expression(binary.left)} {op} {self._expression(binary.right)}"

    def _fncall(self, call: FuncCallNode) -> str:
        if get_builtin(call.identifier.lexeme) == BuiltinKind.PRINT:
            arg = call.args[0]
            arg_type = arg.type
            if is_integer(arg_type):
                return f'printf("%d", {self._expression(arg)})'
            if is_floating(arg_type):
                return f'printf("%f", {self._expression(arg)})'
            if arg_type == SmplType.String:
                return f'printf("%s", "{self._expression(arg)}")'
            return ""
        args = ", ".join(self._expression(arg) for arg in call.args)
        return f"{call.identifier.lexeme} ({args})"