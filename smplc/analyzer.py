"""Semantic analysis: scopes, symbol resolution and type checking."""

from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Iterator

from smplc.errors import CompilerError, SmplTypeError, report_error
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
from smplc.symbols import FuncSymbol, Symbol, VarSymbol
from smplc.tokens import Token, TokenKind
from smplc.typecheck import (
    BuiltinKind,
    SmplType,
    are_assign_compatible,
    are_binary_compatible,
    fits_in_type,
    get_builtin,
    is_builtin,
    is_castable,
    is_floating,
    is_integer,
    is_numeric,
    is_type,
    str_to_type,
)

_SAME_AS_LEFT_OPS = frozenset(
    {
        TokenKind.Plus,
        TokenKind.Minus,
        TokenKind.Star,
        TokenKind.ForSlash,
        TokenKind.Percent,
        TokenKind.Equal,
        TokenKind.PlusEqual,
        TokenKind.MinusEqual,
        TokenKind.StarEqual,
        TokenKind.ForSlashEqual,
        TokenKind.PercentEqual,
    }
)

_BOOLEAN_OPS = frozenset(
    {
        TokenKind.EqualEqual,
        TokenKind.NotEqual,
        TokenKind.LesserThan,
        TokenKind.LesserEqual,
        TokenKind.GreaterThan,
        TokenKind.GreaterEqual,
        TokenKind.And,
        TokenKind.Or,
    }
)

_BUILTIN_PRINTS: tuple[tuple[str, SmplType], ...] = (
    ("print_str", SmplType.String),
    ("print_int", SmplType.Int),
    ("print_float", SmplType.Float32),
)


def _name(member: Enum) -> str:
    return member.name.rstrip("_")


class SemanticAnalyzer:
    """Checks a parsed program and annotates its expressions with types."""

    def __init__(self, program: list[StmtNode]) -> None:
        self.program = program
        self.symbol_table: list[dict[str, Symbol]] = []
        self.cur_func_return_type = SmplType.Unknown
        self.enter_scope()
        for name, param_type in _BUILTIN_PRINTS:
            token = Token(TokenKind.Identifier, name, 1)
            self.declare_symbol(name, FuncSymbol(SmplType.Void, [param_type], token))

    # Scopes and symbols

    def declare_symbol(self, name: str, symbol: Symbol) -> bool:
        """Declare ``name`` in the innermost scope; False if it cannot be."""
        if is_builtin(name):
            return False
        if not self.symbol_table:
            raise CompilerError("No scope available for declaration", symbol.token.line)
        scope = self.symbol_table[-1]
        if name in scope:
            return False
        if is_type(name):
            raise CompilerError(
                f"Cannot declare built-in primitive type name: {name}", symbol.token.line
            )
        scope[name] = symbol
        return True

    def lookup(self, name: str) -> Symbol | None:
        """Find ``name`` in the innermost scope that declares it."""
        for scope in reversed(self.symbol_table):
            if name in scope:
                return scope[name]
        return None

    def enter_scope(self) -> None:
        self.symbol_table.append({})

    def exit_scope(self) -> None:
        self.symbol_table.pop()

    @contextmanager
    def _scope(self) -> Iterator[None]:
        self.enter_scope()
        try:
            yield
        finally:
            self.exit_scope()

    def to_type(self, type_str: str) -> SmplType:
        return str_to_type(type_str, 0)

    # Driver

    def analyze(self) -> bool:
        """Check every top-level statement; return True if any error was reported."""
        had_error = False
        for statement in self.program:
            try:
                self.analyze_stmt(statement)
            except CompilerError as err:
                report_error(err.line_number, err.message)
                had_error = True
        self.exit_scope()
        return had_error

    # Statements

    def analyze_stmt(self, stmt: StmtNode) -> None:
        match stmt:
            case AssignmentNode():
                self._analyze_assignment(stmt)
            case BlockNode():
                with self._scope():
                    for inner in stmt.statements:
                        self.analyze_stmt(inner)
            case ExprStmt():
                self.analyze_expr(stmt.expr)
            case DefnNode():
                self._analyze_fndecl(stmt)
            case ForNode():
                iter_type = self.analyze_expr(stmt.iterator)
                if iter_type == SmplType.Range:
                    iter_type = SmplType.Int
                with self._scope():
                    self.declare_symbol(stmt.bind_var.lexeme, VarSymbol(iter_type, stmt.bind_var))
                    self.analyze_stmt(stmt.block)
            case IfNode():
                for branch in stmt.branches:
                    if branch.condition is not None:
                        self.analyze_expr(branch.condition)
                    self.analyze_stmt(branch.block)
            case ParamNode():
                for name, type_token in stmt.params:
                    param_type = str_to_type(type_token.lexeme, stmt.line)
                    self.declare_symbol(name.lexeme, VarSymbol(param_type, name))
            case ReturnNode():
                self._analyze_return(stmt)
            case WhileNode():
                self.analyze_expr(stmt.condition)
                self.analyze_stmt(stmt.block)

    def _analyze_assignment(self, stmt: AssignmentNode) -> None:
        declared = str_to_type(stmt.var_type.lexeme, stmt.line)
        right_type = self.analyze_expr(stmt.right)
        if not are_assign_compatible(declared, right_type):
            raise SmplTypeError(
                f"Incompatible types for assignment: {_name(right_type)} to {_name(declared)}",
                stmt.line,
            )
        if isinstance(stmt.right, NumLitNode) and not fits_in_type(
            declared, stmt.right.literal.lexeme
        ):
            raise CompilerError("An overflow will occur here", stmt.right.line)
        if not self.declare_symbol(stmt.variable.lexeme, VarSymbol(declared, stmt.variable)):
            raise CompilerError(f"{stmt.variable.lexeme} already defined", stmt.line)

    def _analyze_fndecl(self, defn: DefnNode) -> None:
        try:
            return_type = SmplType.Void
            if defn.return_type is not None:
                return_type = str_to_type(defn.return_type.lexeme, defn.line)
            self.cur_func_return_type = return_type

            params = defn.params
            param_types = (
                [str_to_type(type_.lexeme, params.line) for _, type_ in params.params]
                if isinstance(params, ParamNode)
                else []
            )
            symbol = FuncSymbol(return_type, param_types, defn.identifier)
            if not self.declare_symbol(defn.identifier.lexeme, symbol):
                raise CompilerError(f"{defn.identifier.lexeme} is already defined", defn.line)
        except CompilerError as err:
            report_error(err.line_number, err.message)
            return

        try:
            with self._scope():
                self.analyze_stmt(defn.params)
                self.analyze_stmt(defn.block)
        finally:
            self.cur_func_return_type = SmplType.Unknown

    def _analyze_return(self, stmt: ReturnNode) -> None:
        return_type = SmplType.Void
        if stmt.return_expr is not None:
            return_type = self.analyze_expr(stmt.return_expr)
        if are_assign_compatible(self.cur_func_return_type, return_type):
            return
        if stmt.return_expr is not None:
            raise SmplTypeError(
                "Expression type does not match the function's return type",
                stmt.return_expr.line,
            )
        raise SmplTypeError("Function expects a return value, returned 'void' instead", stmt.line)

    # Expressions

    def analyze_expr(self, expr: ExprNode) -> SmplType:
        """Return the type of ``expr``, recording it on the nodes."""
        match expr:
            case BinaryExpr():
                return self._analyze_binary(expr)
            case BooleanLiteral():
                return SmplType.Boolean
            case FuncCallNode():
                return self._analyze_fncall(expr)
            case GroupingExpr():
                inner = self.analyze_expr(expr.expr)
                expr.expr.type = inner
                expr.type = inner
                return inner
            case IdentifierNode():
                symbol = self.lookup(expr.identifier.lexeme)
                if symbol is None:
                    raise CompilerError(f"{expr.identifier.lexeme} is not defined", expr.line)
                expr.type = symbol.symbol_type
                return expr.type
            case TypeNode():
                expr.type = str_to_type(expr.type_token.lexeme, expr.line)
                return expr.type
            case NumLitNode():
                is_float = "." in expr.literal.lexeme
                expr.type = SmplType.UntypedFloat if is_float else SmplType.UntypedInt
                return expr.type
            case UnaryNode():
                return self._analyze_unary(expr)
            case CondExprNode():
                return self._analyze_cond(expr)
            case StringLiteral():
                return SmplType.String
        raise CompilerError("Unknown expression", expr.line)

    def _analyze_binary(self, binary: BinaryExpr) -> SmplType:
        left_type = self.analyze_expr(binary.left)
        binary.left.type = left_type
        right_type = self.analyze_expr(binary.right)
        binary.right.type = right_type
        op = binary.op.kind

        if not are_binary_compatible(left_type, right_type) and op != TokenKind.As:
            raise SmplTypeError(
                "Incompatible types for binary operation: "
                f"{_name(left_type)} <{_name(op)}> {_name(right_type)}",
                binary.line,
            )

        if op in _SAME_AS_LEFT_OPS:
            binary.type = left_type
            return left_type
        if op in _BOOLEAN_OPS:
            binary.type = SmplType.Boolean
            return SmplType.Boolean
        if op == TokenKind.As:
            if not isinstance(binary.right, TypeNode):
                raise CompilerError(
                    "Expected a type for right hand operand for 'as' opeprator",
                    binary.right.line,
                )
            if is_castable(left_type, right_type):
                binary.left.type = right_type
                binary.type = right_type
                return right_type
            raise SmplTypeError(
                f"Invalid cast from {_name(left_type)} to {_name(right_type)}", binary.op.line
            )
        if op == TokenKind.Range:
            binary.type = SmplType.Range
            return SmplType.Range
        raise CompilerError("Unknown operator", binary.line)

    def _analyze_fncall(self, call: FuncCallNode) -> SmplType:
        name = call.identifier.lexeme
        arg_type = self.analyze_expr(call.args[0]) if call.args else SmplType.Void

        if get_builtin(name) == BuiltinKind.PRINT:
            if is_integer(arg_type):
                target = "print_int"
            elif is_floating(arg_type):
                target = "print_float"
            elif arg_type == SmplType.String:
                target = "print_str"
            else:
                raise SmplTypeError(
                    "Built-in 'print' function only accepts integer, float, and string "
                    f"expressions. Got {_name(arg_type)} instead",
                    call.line,
                )
            printer = self.lookup(target)
            assert isinstance(printer, FuncSymbol)
            self._check_arity(call, printer)
            call.type = SmplType.Void
            return SmplType.Void

        symbol = self.lookup(name)
        if symbol is None:
            raise CompilerError(f"{name} is not defined", call.line)
        if not isinstance(symbol, FuncSymbol):
            raise CompilerError(f"{name} is not a function", call.line)
        self._check_arity(call, symbol)

        for param_type, arg in zip(symbol.param_types, call.args):
            if not are_assign_compatible(param_type, self.analyze_expr(arg)):
                raise CompilerError("Incompatible types", call.line)

        call.type = symbol.return_type
        return symbol.return_type

    @staticmethod
    def _check_arity(call: FuncCallNode, symbol: FuncSymbol) -> None:
        if len(call.args) != len(symbol.param_types):
            raise CompilerError(
                f"Function call '{call.identifier.lexeme}' has {len(call.args)} arguments, "
                f"expected {len(symbol.param_types)}",
                call.line,
            )

    def _analyze_unary(self, unary: UnaryNode) -> SmplType:
        right_type = self.analyze_expr(unary.right)
        if unary.op.kind == TokenKind.Not:
            if right_type != SmplType.Boolean:
                raise SmplTypeError(
                    "Logical 'not' operator only accepts a boolean operand", unary.line
                )
            unary.type = SmplType.Boolean
            return SmplType.Boolean
        if unary.op.kind == TokenKind.Minus:
            if not is_numeric(right_type):
                raise SmplTypeError(
                    "Negation '-' operator only accepts numeric values as an operand",
                    unary.line,
                )
            unary.type = right_type
            return right_type
        raise CompilerError("Invalid operator for unary expression", unary.line)

    def _analyze_cond(self, cond: CondExprNode) -> SmplType:
        if_val_type = self.analyze_expr(cond.if_val)
        if_expr_type = self.analyze_expr(cond.if_expr)
        else_val_type = self.analyze_expr(cond.else_val)
        if if_expr_type != SmplType.Boolean:
            raise SmplTypeError(
                "Condition after if must be a boolean expression", cond.if_expr.line
            )
        if if_val_type != else_val_type:
            raise SmplTypeError(
                "Default value and the else value must be the same type", cond.line
            )
        cond.type = if_val_type
        return if_val_type