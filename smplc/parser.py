"""Builds the syntax tree from a token list using precedence climbing."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Sequence

from smplc.errors import CompilerError, SmplSyntaxError, report_error
from smplc.nodes import (
    AssignmentNode,
    BinaryExpr,
    BlockNode,
    BooleanLiteral,
    ConditionBlock,
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
from smplc.tokens import Token, TokenKind


class Assoc(Enum):
    """Associativity of an infix operator."""

    LEFT = auto()
    RIGHT = auto()


@dataclass(frozen=True, slots=True)
class OperatorInfo:
    precedence: int
    associativity: Assoc


def _ops(precedence: int, assoc: Assoc, *kinds: TokenKind) -> dict[TokenKind, OperatorInfo]:
    return {kind: OperatorInfo(precedence, assoc) for kind in kinds}


OPERATOR_TABLE: dict[TokenKind, OperatorInfo] = {
    **_ops(
        1,
        Assoc.RIGHT,
        TokenKind.Equal,
        TokenKind.PlusEqual,
        TokenKind.MinusEqual,
        TokenKind.StarEqual,
        TokenKind.ForSlashEqual,
        TokenKind.PercentEqual,
        TokenKind.AmperEqual,
        TokenKind.CaretEqual,
        TokenKind.PipeEqual,
        TokenKind.LesserLesserEqual,
        TokenKind.GreaterGreaterEqual,
    ),
    **_ops(2, Assoc.LEFT, TokenKind.Or),
    **_ops(3, Assoc.LEFT, TokenKind.And),
    **_ops(4, Assoc.LEFT, TokenKind.Pipe),
    **_ops(5, Assoc.LEFT, TokenKind.Caret),
    **_ops(6, Assoc.LEFT, TokenKind.Ampersand),
    **_ops(7, Assoc.LEFT, TokenKind.EqualEqual, TokenKind.NotEqual),
    **_ops(
        8,
        Assoc.LEFT,
        TokenKind.LesserThan,
        TokenKind.LesserEqual,
        TokenKind.GreaterThan,
        TokenKind.GreaterEqual,
    ),
    # Bit shifts, the range '..' operator and the 'as' cast.
    **_ops(
        9,
        Assoc.LEFT,
        TokenKind.LesserLesser,
        TokenKind.GreaterGreater,
        TokenKind.Range,
        TokenKind.As,
    ),
    **_ops(10, Assoc.LEFT, TokenKind.Plus, TokenKind.Minus),
    **_ops(11, Assoc.LEFT, TokenKind.Star, TokenKind.ForSlash, TokenKind.Percent),
}

_UNARY_PRECEDENCE = 100

_EXPR_STMT_STARTS = frozenset(
    {
        TokenKind.Identifier,
        TokenKind.NumLiteral,
        TokenKind.True_,
        TokenKind.False_,
        TokenKind.LeftParen,
        TokenKind.Not,
        TokenKind.Minus,
    }
)

_SYNC_STARTS = frozenset(
    {
        TokenKind.Defn,
        TokenKind.Let,
        TokenKind.Return,
        TokenKind.If,
        TokenKind.While,
        TokenKind.For,
    }
)


def _kind_name(kind: TokenKind) -> str:
    return kind.name.rstrip("_")


class Parser:
    """Recursive-descent parser for statements, Pratt parser for expressions."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].kind != TokenKind.Eof:
            line = self.tokens[-1].line if self.tokens else 1
            self.tokens.append(Token(TokenKind.Eof, "EOF", line))
        self._current = 0

    def parse(self) -> list[StmtNode]:
        """Parse every statement, reporting errors and recovering after each."""
        statements: list[StmtNode] = []
        while not self._at_end():
            try:
                statements.append(self._parse_statement())
            except CompilerError as err:
                report_error(self._peek().line, err.message)
                self._synchronize()
        return statements

    # Statements

    def _parse_statement(self) -> StmtNode:
        kind = self._peek().kind
        if kind == TokenKind.Defn:
            return self._parse_fndecl()
        if kind == TokenKind.Let:
            return self._parse_assignment()
        if kind == TokenKind.Return:
            return self._parse_return()
        if kind == TokenKind.For:
            return self._parse_for()
        if kind == TokenKind.If:
            return self._parse_if()
        if kind == TokenKind.While:
            return self._parse_while()
        if kind == TokenKind.LeftBrace:
            return self._parse_block()
        if kind in _EXPR_STMT_STARTS:
            return self._parse_expr_stmt()
        raise SmplSyntaxError(f"Unexpected token: {self._peek().lexeme}", self._peek().line)

    def _parse_fndecl(self) -> StmtNode:
        line = self._consume(TokenKind.Defn).line
        identifier = self._consume(TokenKind.Identifier)
        is_main = identifier.lexeme == "main"

        params = self._parse_params()

        return_type: Token | None = None
        if self._peek().kind == TokenKind.ThinArrow:
            self._advance()
            return_type = self._consume(TokenKind.Type)
        elif not is_main and self._peek().kind != TokenKind.LeftBrace:
            raise SmplSyntaxError("Expected block{} or '->", self._peek().line)
        elif is_main:
            return_type = Token(TokenKind.Type, "int", self._peek().line)

        block = self._parse_block()
        return DefnNode(identifier, params, return_type, block, line)

    def _parse_block(self) -> StmtNode:
        line = self._consume(TokenKind.LeftBrace).line
        statements: list[StmtNode] = []
        while self._peek().kind != TokenKind.RightBrace:
            statements.append(self._parse_statement())
        self._consume(TokenKind.RightBrace)
        return BlockNode(statements, line)

    def _parse_params(self) -> StmtNode:
        line = self._consume(TokenKind.LeftParen).line
        params: list[tuple[Token, Token]] = []
        while self._peek().kind != TokenKind.RightParen:
            name = self._consume(TokenKind.Identifier)
            self._consume(TokenKind.Colon)
            type_ = self._consume(TokenKind.Type)
            params.append((name, type_))
            if self._peek().kind == TokenKind.Comma:
                self._advance()
            elif self._peek().kind != TokenKind.RightParen:
                raise SmplSyntaxError("Expected ')' or ','", self._peek().line)
        self._consume(TokenKind.RightParen)
        return ParamNode(params, line)

    def _parse_assignment(self) -> StmtNode:
        line = self._consume(TokenKind.Let).line
        identifier = self._consume(TokenKind.Identifier)
        self._consume(TokenKind.Colon)
        type_ = self._consume(TokenKind.Type)
        self._consume(TokenKind.Equal)
        right = self._parse_expression()
        self._consume(TokenKind.SemiColon)
        return AssignmentNode(identifier, type_, right, line)

    def _parse_return(self) -> StmtNode:
        line = self._consume(TokenKind.Return).line
        expr = None
        if self._peek().kind != TokenKind.SemiColon:
            expr = self._parse_expression()
        self._consume(TokenKind.SemiColon)
        return ReturnNode(expr, line)

    def _parse_for(self) -> StmtNode:
        line = self._consume(TokenKind.For).line
        bind_var = self._consume(TokenKind.Identifier)
        self._consume(TokenKind.In)
        iterator = self._parse_expression()
        block = self._parse_block()
        return ForNode(bind_var, iterator, block, line)

    def _parse_if(self) -> StmtNode:
        line = self._consume(TokenKind.If).line
        cond = self._parse_expression()
        branches = [ConditionBlock(cond, self._parse_block())]

        while self._match(TokenKind.Else):
            if self._peek().kind == TokenKind.If:
                self._advance()
                branch_cond = self._parse_expression()
                branches.append(ConditionBlock(branch_cond, self._parse_block()))
                continue
            branches.append(ConditionBlock(None, self._parse_block()))
            break

        return IfNode(branches, line)

    def _parse_while(self) -> StmtNode:
        line = self._consume(TokenKind.While).line
        cond = self._parse_expression()
        block = self._parse_block()
        return WhileNode(cond, block, line)

    def _parse_expr_stmt(self) -> StmtNode:
        expr = self._parse_expression()
        self._consume(TokenKind.SemiColon)
        return ExprStmt(expr, expr.line)

    # Expressions

    def _parse_expression(self, prec: int = 0) -> ExprNode:
        left = self._nud(self._peek())
        while not self._at_end():
            if self._peek().kind == TokenKind.If and prec < 1:
                left = self._parse_conditional_expr(left)
                continue
            if self._precedence(self._peek()) <= prec:
                break
            op = self._advance()
            left = self._led(op, left)
        return left

    def _parse_fncall(self, identifier: Token) -> ExprNode:
        self._consume(TokenKind.LeftParen)
        args: list[ExprNode] = []
        while self._peek().kind != TokenKind.RightParen:
            args.append(self._parse_expression())
            if self._peek().kind == TokenKind.Comma:
                self._advance()
            elif self._peek().kind != TokenKind.RightParen:
                raise SmplSyntaxError("Expexted ')' or ','", self._peek().line)
        self._consume(TokenKind.RightParen)
        return FuncCallNode(identifier, args, identifier.line)

    def _parse_conditional_expr(self, if_val: ExprNode) -> ExprNode:
        line = self._consume(TokenKind.If).line
        if_expr = self._parse_expression()
        self._consume(TokenKind.Else)
        else_val = self._parse_expression()
        return CondExprNode(if_val, if_expr, else_val, line)

    def _nud(self, token: Token) -> ExprNode:
        kind = token.kind
        if kind == TokenKind.NumLiteral:
            self._advance()
            return NumLitNode(token, token.line)
        if kind == TokenKind.LeftParen:
            line = self._advance().line
            expr = self._parse_expression()
            self._consume(TokenKind.RightParen)
            return GroupingExpr(expr, line)
        if kind == TokenKind.Identifier:
            self._advance()
            if self._peek().kind == TokenKind.LeftParen:
                return self._parse_fncall(token)
            return IdentifierNode(token, token.line)
        if kind in (TokenKind.True_, TokenKind.False_):
            self._advance()
            return BooleanLiteral(token, token.line)
        if kind in (TokenKind.Not, TokenKind.Minus):
            op = self._advance()
            right = self._parse_expression(_UNARY_PRECEDENCE)
            return UnaryNode(op, right, op.line)
        if kind == TokenKind.Type:
            self._advance()
            return TypeNode(token, token.line)
        if kind == TokenKind.StringLiteral:
            self._advance()
            return StringLiteral(token, token.line)
        raise SmplSyntaxError("Expected an expression", self._peek().line)

    def _led(self, op: Token, left: ExprNode) -> ExprNode:
        prec = self._precedence(op)
        assoc = self._associativity(op)
        next_prec = prec if assoc == Assoc.LEFT else prec - 1
        right = self._parse_expression(next_prec)
        return BinaryExpr(op, left, right, op.line)

    # Helpers

    def _synchronize(self) -> None:
        if not self._at_end():
            self._advance()
        while not self._at_end():
            if self._previous().kind in (TokenKind.SemiColon, TokenKind.RightBrace):
                return
            if self._peek().kind in _SYNC_STARTS:
                return
            self._advance()

    @staticmethod
    def _precedence(op: Token) -> int:
        info = OPERATOR_TABLE.get(op.kind)
        return info.precedence if info is not None else 0

    def _associativity(self, op: Token) -> Assoc:
        info = OPERATOR_TABLE.get(op.kind)
        if info is None:
            raise SmplSyntaxError(
                f"Unexpected operator '{op.lexeme}' in expression", self._peek().line
            )
        return info.associativity

    def _consume(self, expected: TokenKind) -> Token:
        if self._peek().kind == expected:
            return self._advance()
        raise SmplSyntaxError(
            f"Unexpected token <{_kind_name(self._peek().kind)}>, "
            f"expected <{_kind_name(expected)}>.",
            self._peek().line,
        )

    def _advance(self) -> Token:
        token = self._peek()
        if self._current < len(self.tokens) - 1:
            self._current += 1
        else:
            self._current = len(self.tokens)
        return token

    def _peek(self) -> Token:
        return self.tokens[min(self._current, len(self.tokens) - 1)]

    def _previous(self) -> Token:
        return self.tokens[self._current - 1]

    def _match(self, kind: TokenKind) -> bool:
        if self._peek().kind == kind:
            self._advance()
            return True
        return False

    def _at_end(self) -> bool:
        return self._peek().kind == TokenKind.Eof


def parse(tokens: Sequence[Token]) -> list[StmtNode]:
    """Parse ``tokens`` into a list of top-level statements."""
    return Parser(tokens).parse()