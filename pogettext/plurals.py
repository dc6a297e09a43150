"""
Plural-Forms expression compiler.

Compiles the C-like expression found after ``plural=`` in a catalog's
``Plural-Forms`` header into an :class:`Expression` that maps a count
``n`` to a plural-form index.

Supported grammar (highest to lowest precedence):
- integer literals, the variable ``n`` and parenthesized sub-expressions
- unary ``!`` and ``-``
- ``*`` ``/`` ``%``
- ``+`` ``-``
- ``<`` ``<=`` ``>`` ``>=``
- ``==`` ``!=``
- ``&`` ``&&``
- ``|`` ``||``
- ``cond ? a : b`` (right-associative)

Usage:
    from pogettext.plurals import compile_plural

    expr = compile_plural("n==1 ? 0 : (n>=2 && n<=4) ? 1 : 2")
    expr.evaluate(3)  # 1
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

# Longest formula accepted; real-world formulas are well under 200 characters
MAX_EXPRESSION_LENGTH = 1000

# Deepest nesting accepted by the parser
MAX_NESTING_DEPTH = 64

UINT32_MASK = 0xFFFFFFFF

_TOKEN_PATTERN = re.compile(
    r"""
        (?P<WHITESPACE>\s+)                          |
        (?P<NUMBER>[0-9]+)                           |
        (?P<NAME>n\b)                                |
        (?P<PARENTHESIS>[()])                        |
        (?P<OPERATOR>&&|\|\||[<>!=]=|[-+*/%?:<>!&|]) |
        (?P<INVALID>\w+|.)
    """,
    re.VERBOSE | re.DOTALL,
)

_EQUALITY = ("==", "!=")
_RELATIONAL = ("<", "<=", ">", ">=")
_ADDITIVE = ("+", "-")
_MULTIPLICATIVE = ("*", "/", "%")


class CompileError(ValueError):
    """Raised when a plural expression does not parse."""

    def __init__(self, message: str, expression: str = "", position: int | None = None):
        self.expression = expression
        self.position = position
        if position is not None:
            message = f"{message} at position {position}"
        super().__init__(message)


def germanic_plural(n: int) -> int:
    """Two-form rule used when a catalog has no usable Plural-Forms header."""
    return 0 if n == 1 else 1


# =============================================================================
# AST
# =============================================================================


@dataclass(frozen=True)
class Literal:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Var:
    def __str__(self) -> str:
        return "n"


@dataclass(frozen=True)
class Unary:
    op: str
    operand: Node

    def __str__(self) -> str:
        return f"{self.op}{_wrap(self.operand)}"


@dataclass(frozen=True)
class Binary:
    op: str
    left: Node
    right: Node

    def __str__(self) -> str:
        return f"{_wrap(self.left)} {self.op} {_wrap(self.right)}"


@dataclass(frozen=True)
class Ternary:
    condition: Node
    then: Node
    otherwise: Node

    def __str__(self) -> str:
        return f"{_wrap(self.condition)} ? {_wrap(self.then)} : {_wrap(self.otherwise)}"


Node = Union[Literal, Var, Unary, Binary, Ternary]


def _wrap(node: Node) -> str:
    if isinstance(node, (Literal, Var)):
        return str(node)
    return f"({node})"


# =============================================================================
# Tokenizer and parser
# =============================================================================


@dataclass(frozen=True)
class _Token:
    kind: str
    value: str
    position: int


def _tokenize(source: str) -> Iterator[_Token]:
    for match in _TOKEN_PATTERN.finditer(source):
        kind = match.lastgroup
        if kind == "WHITESPACE":
            continue
        value = match.group(kind)
        if kind == "INVALID":
            raise CompileError(f"invalid token {value!r}", source, match.start())
        yield _Token(kind, value, match.start())
    yield _Token("END", "", len(source))


class _Parser:
    """Recursive-descent parser producing an AST from a token stream."""

    def __init__(self, source: str):
        self.source = source
        self.tokens = list(_tokenize(source))
        self.index = 0
        self.depth = 0

    @property
    def current(self) -> _Token:
        return self.tokens[self.index]

    def _advance(self) -> _Token:
        token = self.tokens[self.index]
        if token.kind != "END":
            self.index += 1
        return token

    def _error(self, message: str) -> CompileError:
        return CompileError(message, self.source, self.current.position)

    def _expect(self, value: str) -> None:
        if self.current.value != value or self.current.kind == "END":
            found = self.current.value or "end of expression"
            raise self._error(f"expected {value!r}, found {found!r}")
        self._advance()

    def parse(self) -> Node:
        node = self._ternary()
        if self.current.kind != "END":
            raise self._error(f"unexpected token {self.current.value!r}")
        return node

    def _ternary(self) -> Node:
        self.depth += 1
        if self.depth > MAX_NESTING_DEPTH:
            raise self._error("expression is too deeply nested")
        try:
            condition = self._binary_level(0)
            if self.current.value != "?":
                return condition
            self._advance()
            then = self._ternary()
            self._expect(":")
            otherwise = self._ternary()
            return Ternary(condition, then, otherwise)
        finally:
            self.depth -= 1

    # Binary precedence levels, lowest first
    _LEVELS = (("|", "||"), ("&", "&&"), _EQUALITY, _RELATIONAL, _ADDITIVE, _MULTIPLICATIVE)

    def _binary_level(self, level: int) -> Node:
        if level == len(self._LEVELS):
            return self._unary()
        operators = self._LEVELS[level]
        node = self._binary_level(level + 1)
        while self.current.kind == "OPERATOR" and self.current.value in operators:
            op = self._advance().value
            node = Binary(op, node, self._binary_level(level + 1))
        return node

    def _unary(self) -> Node:
        if self.current.kind == "OPERATOR" and self.current.value in ("!", "-"):
            op = self._advance().value
            self.depth += 1
            if self.depth > MAX_NESTING_DEPTH:
                raise self._error("expression is too deeply nested")
            try:
                return Unary(op, self._unary())
            finally:
                self.depth -= 1
        return self._primary()

    def _primary(self) -> Node:
        token = self.current
        if token.kind == "NUMBER":
            self._advance()
            return Literal(int(token.value))
        if token.kind == "NAME":
            self._advance()
            return Var()
        if token.value == "(":
            self._advance()
            node = self._ternary()
            self._expect(")")
            return node
        if token.kind == "END":
            raise self._error("unexpected end of expression")
        raise self._error(f"unexpected token {token.value!r}")


# =============================================================================
# Evaluation
# =============================================================================


def _c_div(a: int, b: int) -> int:
    # C division truncates toward zero
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _c_mod(a: int, b: int) -> int:
    return a - b * _c_div(a, b)


def _evaluate(node: Node, n: int) -> int:
    if isinstance(node, Literal):
        return node.value
    if isinstance(node, Var):
        return n
    if isinstance(node, Unary):
        value = _evaluate(node.operand, n)
        return int(not value) if node.op == "!" else -value
    if isinstance(node, Ternary):
        if _evaluate(node.condition, n):
            return _evaluate(node.then, n)
        return _evaluate(node.otherwise, n)

    op = node.op
    left = _evaluate(node.left, n)
    # Logical operators short-circuit like C
    if op == "&&":
        return int(bool(left) and bool(_evaluate(node.right, n)))
    if op == "||":
        return int(bool(left) or bool(_evaluate(node.right, n)))
    right = _evaluate(node.right, n)
    if op == "*":
        return left * right
    if op == "/":
        return _c_div(left, right)
    if op == "%":
        return _c_mod(left, right)
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "<":
        return int(left < right)
    if op == "<=":
        return int(left <= right)
    if op == ">":
        return int(left > right)
    if op == ">=":
        return int(left >= right)
    if op == "==":
        return int(left == right)
    if op == "!=":
        return int(left != right)
    if op == "&":
        return left & right
    if op == "|":
        return left | right
    raise ValueError(f"unknown operator {op!r}")


class Expression:
    """
    A compiled plural expression.

    Instances are immutable and hold no per-call state, so one instance
    can be shared by every lookup of a catalog across threads.
    """

    __slots__ = ("_source", "_root")

    def __init__(self, source: str, root: Node):
        self._source = source
        self._root = root

    @property
    def source(self) -> str:
        """The formula this expression was compiled from."""
        return self._source

    @property
    def root(self) -> Node:
        return self._root

    def evaluate(self, n: int) -> int:
        """
        Evaluate the expression for a count.

        Args:
            n: Count; reduced to an unsigned 32-bit value like gettext does

        Returns:
            Plural-form index. Returns 0 when evaluation hits a division
            or modulo by zero.
        """
        try:
            return _evaluate(self._root, int(n) & UINT32_MASK)
        except (ZeroDivisionError, ValueError):
            return 0

    __call__ = evaluate

    def __str__(self) -> str:
        return str(self._root)

    def __repr__(self) -> str:
        return f"Expression({self._source!r})"


def compile_plural(source: str) -> Expression:
    """
    Compile a Plural-Forms formula.

    Args:
        source: The text following ``plural=``, e.g. ``"(n != 1)"``.
            A trailing ``;`` is ignored.

    Returns:
        The compiled expression.

    Raises:
        CompileError: If the formula is not valid under the supported grammar.
    """
    text = source.strip()
    if text.endswith(";"):
        text = text[:-1].rstrip()
    if not text:
        raise CompileError("empty plural expression", source)
    if len(text) > MAX_EXPRESSION_LENGTH:
        raise CompileError("plural expression is too long", source)
    try:
        root = _Parser(text).parse()
    except RecursionError:
        raise CompileError("plural expression is too complex", source) from None
    return Expression(text, root)
