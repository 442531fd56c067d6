"""Tokenizer and recursive descent parser for calculator expressions.

Grammar (lowest to highest precedence)::

    expression := term (("+" | "-") term)*
    term       := unary (("*" | "/") unary | implicit)*
    unary      := ("+" | "-") unary | power
    power      := primary (("^" | "**") unary)?
    primary    := NUMBER | NAME | NAME "(" args ")" | "(" expression ")"

``implicit`` is multiplication by juxtaposition (``2x``, ``3(x+1)``).
Names are resolved while parsing, so unknown identifiers are reported before
any evaluation happens.
"""

from __future__ import annotations

import re
from typing import NamedTuple

from . import config
from .evaluator.expression_tree import ExpressionNode
from .evaluator.expression_tree import NodeType
from .evaluator.expression_tree import binary
from .evaluator.expression_tree import constant
from .evaluator.operators import CONSTANTS
from .evaluator.operators import FUNCTIONS
from .evaluator.operators import OPERATOR_SYMBOLS
from .types import MalformedExpression
from .types import UnknownIdentifier

TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
    |(?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
    |(?P<name>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<op>\*\*|[-+*/^])
    |(?P<lparen>\()
    |(?P<rparen>\))
    |(?P<comma>,)
    """,
    re.VERBOSE,
)


class Token(NamedTuple):
    kind: str
    text: str
    position: int


def tokenize(text: str) -> list[Token]:
    """Split expression text into tokens, ending with an ``end`` token."""
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        match = TOKEN_RE.match(text, pos)
        if match is None:
            raise MalformedExpression(
                f"Unexpected character '{text[pos]}' at position {pos}"
            )
        kind = match.lastgroup
        if kind != "space":
            tokens.append(Token(kind, match.group(), pos))
        pos = match.end()
    tokens.append(Token("end", "", len(text)))
    return tokens


class _Parser:
    def __init__(self, tokens: list[Token], variable: str):
        self.tokens = tokens
        self.pos = 0
        self.variable = variable
        self.nesting = 0

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.kind != "end":
            self.pos += 1
        return tok

    def expect(self, kind: str, what: str) -> Token:
        tok = self.peek()
        if tok.kind != kind:
            if tok.kind == "end":
                raise MalformedExpression(f"Expected {what} but the expression ended")
            raise MalformedExpression(
                f"Expected {what} but found '{tok.text}' at position {tok.position}"
            )
        return self.advance()

    def enter(self) -> None:
        self.nesting += 1
        if self.nesting > config.MAX_EXPRESSION_DEPTH:
            raise MalformedExpression(
                f"Expression nested deeper than {config.MAX_EXPRESSION_DEPTH} levels"
            )

    def leave(self) -> None:
        self.nesting -= 1

    def _is_op(self, *symbols: str) -> bool:
        tok = self.peek()
        return tok.kind == "op" and tok.text in symbols

    def parse(self) -> ExpressionNode:
        if self.peek().kind == "end":
            raise MalformedExpression("Empty expression")
        node = self.expression()
        tok = self.peek()
        if tok.kind != "end":
            raise MalformedExpression(f"Unexpected '{tok.text}' at position {tok.position}")
        return node

    def expression(self) -> ExpressionNode:
        node = self.term()
        while self._is_op("+", "-"):
            op = self.advance().text
            node = binary(OPERATOR_SYMBOLS[op], node, self.term())
        return node

    def term(self) -> ExpressionNode:
        node = self.unary()
        while True:
            if self._is_op("*", "/"):
                op = self.advance().text
                node = binary(OPERATOR_SYMBOLS[op], node, self.unary())
            elif self.peek().kind in ("name", "lparen"):
                node = binary("mul", node, self.power())
            else:
                return node

    def unary(self) -> ExpressionNode:
        negative = False
        while self._is_op("+", "-"):
            if self.advance().text == "-":
                negative = not negative
        operand = self.power()
        if negative:
            return ExpressionNode(NodeType.NEGATE, "neg", (operand,))
        return operand

    def power(self) -> ExpressionNode:
        base = self.primary()
        if self._is_op("^", "**"):
            self.advance()
            # Right associative; the exponent may carry its own sign (2^-1)
            self.enter()
            exponent = self.unary()
            self.leave()
            return binary("pow", base, exponent)
        return base

    def primary(self) -> ExpressionNode:
        tok = self.advance()
        if tok.kind == "number":
            value = float(tok.text)
            if value == float("inf"):
                raise MalformedExpression(f"Numeric literal '{tok.text}' is out of range")
            return constant(value)
        if tok.kind == "name":
            return self.name(tok)
        if tok.kind == "lparen":
            self.enter()
            node = self.expression()
            self.expect("rparen", "')'")
            self.leave()
            return node
        if tok.kind == "end":
            raise MalformedExpression("Unexpected end of expression")
        raise MalformedExpression(f"Unexpected '{tok.text}' at position {tok.position}")

    def name(self, tok: Token) -> ExpressionNode:
        name = tok.text
        if name in FUNCTIONS:
            if self.peek().kind != "lparen":
                raise MalformedExpression(f"Function '{name}' must be called with parentheses")
            return self.call(name)
        if name == self.variable:
            return ExpressionNode(NodeType.VARIABLE, name)
        if name in CONSTANTS:
            return ExpressionNode(NodeType.NAMED_CONSTANT, name)
        raise UnknownIdentifier(name)

    def call(self, name: str) -> ExpressionNode:
        self.expect("lparen", "'('")
        self.enter()
        args = []
        if self.peek().kind != "rparen":
            args.append(self.expression())
            while self.peek().kind == "comma":
                self.advance()
                args.append(self.expression())
        self.expect("rparen", f"')' to close {name}(")
        self.leave()
        arity = FUNCTIONS[name].arity
        if len(args) != arity:
            raise MalformedExpression(
                f"{name}() takes {arity} argument{'s' if arity != 1 else ''}, got {len(args)}"
            )
        return ExpressionNode(NodeType.FUNCTION, name, tuple(args))


def parse(text: str, variable: str = "x") -> ExpressionNode:
    """Parse expression text into an expression tree.

    Args:
        text: Expression such as ``"3x^2 - sin(x)/2"``
        variable: Name of the free variable

    Returns:
        Root node of the tree

    Raises:
        MalformedExpression: Syntax errors, arity errors, size limits
        UnknownIdentifier: Names that are not the variable, a constant or a function
    """
    if not isinstance(text, str):
        raise MalformedExpression(f"Expected expression text, got {type(text).__name__}")
    if len(text) > config.MAX_INPUT_LENGTH:
        raise MalformedExpression(
            f"Expression longer than {config.MAX_INPUT_LENGTH} characters"
        )
    root = _Parser(tokenize(text), variable).parse()
    if root.depth() > config.MAX_TREE_DEPTH:
        raise MalformedExpression(
            f"Expression tree deeper than {config.MAX_TREE_DEPTH} levels"
        )
    return root


def split_top_level_commas(text: str) -> list[str]:
    """Split ``text`` on commas that are not inside parentheses or quotes."""
    parts: list[str] = []
    depth = 0
    quote: str | None = None
    current: list[str] = []
    for ch in text:
        if quote:
            if ch == quote:
                quote = None
            current.append(ch)
            continue
        if ch in ("'", '"'):
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(ch)
    parts.append("".join(current).strip())
    return parts


def strip_quotes(text: str) -> str:
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return text[1:-1].strip()
    return text
