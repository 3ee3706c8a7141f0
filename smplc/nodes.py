"""Syntax tree nodes produced by the parser."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar

from smplc.tokens import Token
from smplc.typecheck import SmplType


class ExprASTKind(Enum):
    """Kinds of expression nodes."""

    Binary = auto()
    Unary = auto()
    BooleanLiteral = auto()
    FnCall = auto()
    Grouping = auto()
    Identifier = auto()
    NumberLiteral = auto()
    StringLiteral = auto()
    Type = auto()
    CondExpr = auto()


class StmtASTKind(Enum):
    """Kinds of statement nodes."""

    Assignment = auto()
    Block = auto()
    ExprStmt = auto()
    FnDecl = auto()
    For = auto()
    If = auto()
    Param = auto()
    Return = auto()
    While = auto()


class ExprNode(ABC):
    """An expression; ``type`` is filled in by semantic analysis."""

    kind: ClassVar[ExprASTKind]
    line: int
    type: SmplType

    @abstractmethod
    def dump(self) -> str:
        """Return a textual rendering of the node for debugging."""

    def __str__(self) -> str:
        return self.dump()


class StmtNode(ABC):
    """A statement."""

    kind: ClassVar[StmtASTKind]
    line: int

    @abstractmethod
    def dump(self) -> str:
        """Return a textual rendering of the node for debugging."""

    def __str__(self) -> str:
        return self.dump()


def _dump_optional(node: ExprNode | StmtNode | None) -> str:
    return "" if node is None else node.dump()


# Expressions


@dataclass(eq=False)
class BinaryExpr(ExprNode):
    kind: ClassVar[ExprASTKind] = ExprASTKind.Binary

    op: Token
    left: ExprNode
    right: ExprNode
    line: int
    type: SmplType = SmplType.Unknown

    def dump(self) -> str:
        return f"( {self.op.lexeme} {self.left.dump()} {self.right.dump()})"


@dataclass(eq=False)
class BooleanLiteral(ExprNode):
    kind: ClassVar[ExprASTKind] = ExprASTKind.BooleanLiteral

    literal: Token
    line: int
    type: SmplType = SmplType.Boolean

    def dump(self) -> str:
        return self.literal.lexeme


@dataclass(eq=False)
class CondExprNode(ExprNode):
    """``if_val if if_expr else else_val``."""

    kind: ClassVar[ExprASTKind] = ExprASTKind.CondExpr

    if_val: ExprNode
    if_expr: ExprNode
    else_val: ExprNode
    line: int
    type: SmplType = SmplType.Unknown

    def dump(self) -> str:
        return ""


@dataclass(eq=False)
class FuncCallNode(ExprNode):
    kind: ClassVar[ExprASTKind] = ExprASTKind.FnCall

    identifier: Token
    args: list[ExprNode]
    line: int
    type: SmplType = SmplType.Unknown

    def dump(self) -> str:
        args = "".join(f"{arg.dump()} " for arg in self.args)
        return (
            "Function call\n"
            f"Identifier: {self.identifier.lexeme}\n"
            f"Args: {args}"
            "\nEnd function call"
        )


@dataclass(eq=False)
class GroupingExpr(ExprNode):
    kind: ClassVar[ExprASTKind] = ExprASTKind.Grouping

    expr: ExprNode
    line: int
    type: SmplType = SmplType.Unknown

    def dump(self) -> str:
        return f"{{{self.expr.dump()}}}"


@dataclass(eq=False)
class IdentifierNode(ExprNode):
    kind: ClassVar[ExprASTKind] = ExprASTKind.Identifier

    identifier: Token
    line: int
    type: SmplType = SmplType.Unknown

    def dump(self) -> str:
        return self.identifier.lexeme


@dataclass(eq=False)
class NumLitNode(ExprNode):
    kind: ClassVar[ExprASTKind] = ExprASTKind.NumberLiteral

    literal: Token
    line: int
    type: SmplType = SmplType.Unknown

    def dump(self) -> str:
        return self.literal.lexeme


@dataclass(eq=False)
class StringLiteral(ExprNode):
    kind: ClassVar[ExprASTKind] = ExprASTKind.StringLiteral

    literal: Token
    line: int
    type: SmplType = SmplType.String

    def dump(self) -> str:
        return self.literal.lexeme


@dataclass(eq=False)
class TypeNode(ExprNode):
    """A type name used as an operand, e.g. the right side of ``as``.

    ``type_token`` holds the written name; ``type`` the resolved type.
    """

    kind: ClassVar[ExprASTKind] = ExprASTKind.Type

    type_token: Token
    line: int
    type: SmplType = SmplType.Unknown

    def dump(self) -> str:
        return self.type_token.lexeme


@dataclass(eq=False)
class UnaryNode(ExprNode):
    kind: ClassVar[ExprASTKind] = ExprASTKind.Unary

    op: Token
    right: ExprNode
    line: int
    type: SmplType = SmplType.Unknown

    def dump(self) -> str:
        return f" [{self.op.lexeme} {self.right.dump()}]"


# Statements


@dataclass(eq=False)
class AssignmentNode(StmtNode):
    """``let variable: var_type = right;``"""

    kind: ClassVar[StmtASTKind] = StmtASTKind.Assignment

    variable: Token
    var_type: Token
    right: ExprNode
    line: int

    def dump(self) -> str:
        return (
            "Assignment\n"
            f"Variable: {self.variable.lexeme}\n"
            f"Type: {self.var_type.lexeme}\n"
            f"Expr: {self.right.dump()}"
            f"\nEnd assignment for {self.variable.lexeme}"
        )


@dataclass(eq=False)
class BlockNode(StmtNode):
    kind: ClassVar[StmtASTKind] = StmtASTKind.Block

    statements: list[StmtNode]
    line: int

    def dump(self) -> str:
        body = "".join(f"{stmt.dump()}\n" for stmt in self.statements)
        return f"{{\n{body}}}\n"


@dataclass(eq=False)
class ConditionBlock:
    """One branch of an ``if``; a ``None`` condition marks the ``else``."""

    condition: ExprNode | None
    block: StmtNode


@dataclass(eq=False)
class ExprStmt(StmtNode):
    kind: ClassVar[StmtASTKind] = StmtASTKind.ExprStmt

    expr: ExprNode
    line: int

    def dump(self) -> str:
        return self.expr.dump()


@dataclass(eq=False)
class ParamNode(StmtNode):
    """Parameter list as (name, type) token pairs."""

    kind: ClassVar[StmtASTKind] = StmtASTKind.Param

    params: list[tuple[Token, Token]]
    line: int

    def dump(self) -> str:
        return "".join(f"{name.lexeme} {type_.lexeme} " for name, type_ in self.params)


@dataclass(eq=False)
class DefnNode(StmtNode):
    """A function declaration."""

    kind: ClassVar[StmtASTKind] = StmtASTKind.FnDecl

    identifier: Token
    params: StmtNode
    return_type: Token | None
    block: StmtNode
    line: int

    def dump(self) -> str:
        return_type = self.return_type.lexeme if self.return_type is not None else ""
        return (
            f"Function name: {self.identifier.lexeme}\n"
            f"Params: {self.params.dump()}\n"
            f"Return type: {return_type}\n"
            f"{self.block.dump()}"
            f"End {self.identifier.lexeme}\n"
        )


@dataclass(eq=False)
class ForNode(StmtNode):
    kind: ClassVar[StmtASTKind] = StmtASTKind.For

    bind_var: Token
    iterator: ExprNode
    block: StmtNode
    line: int

    def dump(self) -> str:
        return (
            "For loop\n"
            f"Bind var: {self.bind_var.lexeme}\n"
            f"In: {self.iterator.dump()}\n"
            f"Block: {self.block.dump()}"
            "End for loop"
        )


@dataclass(eq=False)
class IfNode(StmtNode):
    kind: ClassVar[StmtASTKind] = StmtASTKind.If

    branches: list[ConditionBlock] = field(default_factory=list)
    line: int = 0

    def dump(self) -> str:
        parts = ["If stmt\n"]
        for branch in self.branches:
            parts.append(f"Condition: {_dump_optional(branch.condition)}\n")
            parts.append(f"Branch: {branch.block.dump()}")
        parts.append("End if stmt")
        return "".join(parts)


@dataclass(eq=False)
class ReturnNode(StmtNode):
    kind: ClassVar[StmtASTKind] = StmtASTKind.Return

    return_expr: ExprNode | None
    line: int

    def dump(self) -> str:
        return f"Return: {_dump_optional(self.return_expr)}"


@dataclass(eq=False)
class WhileNode(StmtNode):
    kind: ClassVar[StmtASTKind] = StmtASTKind.While

    condition: ExprNode
    block: StmtNode
    line: int

    def dump(self) -> str:
        return (
            "While loop\n"
            f"Condition: {self.condition.dump()}\n"
            f"Block: {self.block.dump()}"
            "End while loop"
        )