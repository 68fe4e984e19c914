"""Recursive-descent evaluator for ``/eval``.

Grammar, standard precedence and left associativity::

    expr   := term (('+' | '-') term)*
    term   := factor (('*' | '/' | '%') factor)*
    factor := '-' factor | '(' expr ')' | number
    number := digit+

Values are confined to the signed 64-bit range. A result outside it fails
on the operator that produced it instead of wrapping.
"""

from .errors import NeteroError

I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


class EvalError(NeteroError):
    """Base class for arithmetic evaluation failures."""


class EmptyExpression(EvalError):
    pass


class InvalidToken(EvalError):
    def __init__(self, char: str):
        super().__init__(char)
        self.char = char


class MismatchedParens(EvalError):
    pass


class DivisionByZero(EvalError):
    pass


_MESSAGES = {
    "en": {
        EmptyExpression: "empty expression",
        InvalidToken: "invalid token: '{char}'",
        MismatchedParens: "mismatched parentheses",
        DivisionByZero: "division by zero",
    },
    "es": {
        EmptyExpression: "expresión vacía",
        InvalidToken: "token inválido: '{char}'",
        MismatchedParens: "paréntesis desbalanceados",
        DivisionByZero: "división por cero",
    },
}


def format_eval_error(err: EvalError, lang: str = "en") -> str:
    """User-facing message for *err* in *lang* (English fallback)."""
    table = _MESSAGES.get(lang, _MESSAGES["en"])
    template = table[type(err)]
    return template.format(char=getattr(err, "char", ""))


def _checked(value: int, op: str) -> int:
    if value < I64_MIN or value > I64_MAX:
        raise InvalidToken(op)
    return value


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def peek(self) -> str | None:
        if self.pos < len(self.text):
            return self.text[self.pos]
        return None

    def advance(self) -> str | None:
        ch = self.peek()
        if ch is not None:
            self.pos += 1
        return ch

    def skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def expr(self) -> int:
        value = self.term()
        while True:
            self.skip_ws()
            op = self.peek()
            if op == "+":
                self.advance()
                value = _checked(value + self.term(), "+")
            elif op == "-":
                self.advance()
                value = _checked(value - self.term(), "-")
            else:
                return value

    def term(self) -> int:
        value = self.factor()
        while True:
            self.skip_ws()
            op = self.peek()
            if op == "*":
                self.advance()
                value = _checked(value * self.factor(), "*")
            elif op in ("/", "%"):
                self.advance()
                rhs = self.factor()
                if rhs == 0:
                    raise DivisionByZero()
                quotient = _checked(_trunc_div(value, rhs), op)
                value = quotient if op == "/" else value - rhs * quotient
            else:
                return value

    def factor(self) -> int:
        self.skip_ws()
        ch = self.peek()
        if ch is None:
            raise EmptyExpression()
        if ch == "-":
            self.advance()
            return _checked(-self.factor(), "-")
        if ch == "(":
            self.advance()
            value = self.expr()
            self.skip_ws()
            if self.advance() != ")":
                raise MismatchedParens()
            return value
        if ch.isdigit() and ch.isascii():
            return self.number()
        raise InvalidToken(ch)

    def number(self) -> int:
        start = self.pos
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if not (ch.isascii() and ch.isdigit()):
                break
            self.pos += 1
        digits = self.text[start : self.pos]
        value = int(digits)
        if value > I64_MAX:
            raise InvalidToken(digits[0])
        return value


def evaluate(text: str) -> int:
    """Evaluate *text* and return its integer value.

    Raises a subclass of :class:`EvalError` on failure.
    """
    parser = _Parser(text)
    value = parser.expr()
    parser.skip_ws()
    leftover = parser.peek()
    if leftover is not None:
        raise InvalidToken(leftover)
    return value
