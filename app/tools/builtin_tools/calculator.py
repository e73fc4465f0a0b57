"""
CalculatorTool：计算器（旧版执行接口）

两种模式：
1. expression 非空：先按白名单 [0-9+\\-*/().\\s] 过滤，再交给递归下降解析器计算
2. 否则按 operation + num1 / num2 计算

除零、负数开方、未知操作、溢出都以 ToolResult.fail 返回。
"""

import math
import re
from typing import Any, Mapping

from pydantic import BaseModel, Field

from app.tools.base import BaseTool, ToolResult
from app.tools.expression import evaluate

_DISALLOWED_RE = re.compile(r"[^0-9+\-*/().\s]")
MAX_EXPRESSION_LENGTH = 512
MAX_INT_BITS = 1024  # 与 float 上限同量级

Number = int | float


_TEMPLATES: dict[str, str] = {
    "add": "{a} + {b} = {r}",
    "subtract": "{a} - {b} = {r}",
    "multiply": "{a} × {b} = {r}",
    "divide": "{a} ÷ {b} = {r}",
    "power": "{a}^{b} = {r}",
    "sqrt": "√{a} = {r}",
    "percentage": "{a}% of {b} = {r}",
}


class _Params(BaseModel):
    operation: str | None = Field(default=None, description="add/subtract/multiply/divide/power/sqrt/percentage")
    num1: Number = 0
    num2: Number = 0
    expression: str = ""


class _TooLarge(Exception):
    pass


def normalize(value: Number) -> Number:
    """整数值统一按 int 输出（8.0 → 8），非有限值与超出浮点范围的整数视为溢出"""
    if isinstance(value, int) and value.bit_length() > MAX_INT_BITS:
        raise _TooLarge()
    if isinstance(value, float):
        if not math.isfinite(value):
            raise _TooLarge()
        if value.is_integer() and abs(value) < 1e15:
            return int(value)
    return value


def format_number(value: Number) -> str:
    return str(normalize(value))


class CalculatorTool(BaseTool):

    @property
    def slug(self) -> str:
        return "calculator"

    @property
    def params_model(self) -> type[BaseModel]:
        return _Params

    def execute(self, params: _Params, config: Mapping[str, Any]) -> ToolResult:
        if params.expression:
            return self._evaluate_expression(params.expression)
        return self._apply_operation(params.operation, params.num1, params.num2)

    def _evaluate_expression(self, raw: str) -> ToolResult:
        expression = _DISALLOWED_RE.sub("", raw).strip()
        if len(expression) > MAX_EXPRESSION_LENGTH:
            return ToolResult.fail("Expression too long", expression=expression[:MAX_EXPRESSION_LENGTH])
        try:
            result = normalize(evaluate(expression))
            formatted = f"{expression} = {result}"
        except ZeroDivisionError:
            return ToolResult.fail("Cannot divide by zero", expression=expression)
        except (_TooLarge, OverflowError):
            return ToolResult.fail("Result is too large", expression=expression)
        except ValueError:
            # ExpressionError
            return ToolResult.fail("Invalid expression", expression=expression)

        return ToolResult.success(result=result, expression=expression, formatted=formatted)

    def _apply_operation(self, operation: str | None, num1: Number, num2: Number) -> ToolResult:
        try:
            match operation:
                case "add":
                    result = num1 + num2
                case "subtract":
                    result = num1 - num2
                case "multiply":
                    result = num1 * num2
                case "divide":
                    if num2 == 0:
                        return ToolResult.fail("Cannot divide by zero")
                    result = num1 / num2
                case "power":
                    result = math.pow(num1, num2)
                case "sqrt":
                    if num1 < 0:
                        return ToolResult.fail("Cannot calculate square root of negative number")
                    result = math.sqrt(num1)
                case "percentage":
                    result = (num1 / 100) * num2
                case _:
                    return ToolResult.fail("Unknown operation")
            result = normalize(result)
            formatted = _TEMPLATES[operation].format(
                a=format_number(num1), b=format_number(num2), r=result
            )
        except (_TooLarge, OverflowError):
            return ToolResult.fail("Result is too large")
        except ValueError:
            # math.pow 负底数配小数指数等
            return ToolResult.fail("Result is not a real number")

        return ToolResult.success(
            result=result,
            operation=operation,
            operands=[num1, num2],
            formatted=formatted,
        )
