"""
四则运算表达式解析器（递归下降）

文法：
    expr   := term (("+" | "-") term)*
    term   := factor (("*" | "/") factor)*
    factor := ("+" | "-") factor | NUMBER | "(" expr ")"
    NUMBER := DIGITS ["." DIGITS] | "." DIGITS

只做数值计算，不执行任何代码。整数字面量保持 int，除法一律为真除法。
"""

import re

_TOKEN_RE = re.compile(r"\s*(?:(\d+\.\d*|\.\d+|\d+)|(.))")
MAX_DEPTH = 64


class ExpressionError(ValueError):
    """表达式不符合文法"""


Number = int | float


def tokenize(expression: str) -> list[str]:
    tokens = []
    for number, op in _TOKEN_RE.findall(expression):
        if number:
            tokens.append(number)
        elif op.strip():
            if op not in "+-*/()":
                raise ExpressionError(f"非法字符: {op!r}")
            tokens.append(op)
    return tokens


class _Parser:
    def __init__(self, tokens: list[str]):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    def peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def take(self) -> str:
        token = self.peek()
        if token is None:
            raise ExpressionError("表达式意外结束")
        self.pos += 1
        return token

    def parse(self) -> Number:
        if not self.tokens:
            raise ExpressionError("空表达式")
        value = self.expr()
        if self.peek() is not None:
            raise ExpressionError(f"多余的符号: {self.peek()!r}")
        return value

    def expr(self) -> Number:
        value = self.term()
        while self.peek() in ("+", "-"):
            if self.take() == "+":
                value = value + self.term()
            else:
                value = value - self.term()
        return value

    def term(self) -> Number:
        value = self.factor()
        while self.peek() in ("*", "/"):
            if self.take() == "*":
                value = value * self.factor()
            else:
                divisor = self.factor()
                if divisor == 0:
                    raise ZeroDivisionError("division by zero")
                value = value / divisor
        return value

    def factor(self) -> Number:
        self.depth += 1
        if self.depth > MAX_DEPTH:
            raise ExpressionError("嵌套层级过深")
        try:
            token = self.take()
            if token == "+":
                return +self.factor()
            if token == "-":
                return -self.factor()
            if token == "(":
                value = self.expr()
                if self.take() != ")":
                    raise ExpressionError("括号不匹配")
                return value
            if token in "*/)":
                raise ExpressionError(f"意外的符号: {token!r}")
            return _to_number(token)
        finally:
            self.depth -= 1


def _to_number(literal: str) -> Number:
    if "." in literal:
        return float(literal)
    return int(literal)


def evaluate(expression: str) -> Number:
    """
    计算表达式的值。

    Raises:
        ExpressionError: 不符合文法
        ZeroDivisionError: 除数为 0
    """
    return _Parser(tokenize(expression)).parse()
