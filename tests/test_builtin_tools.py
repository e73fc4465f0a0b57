"""内置工具计算逻辑（不经过 HTTP）"""

import pytest

from app.tools.builtin_tools import create_builtin_registry
from app.tools.builtin_tools.color_palette import parse_hex, to_hex
from app.tools.builtin_tools.json_formatter import MAX_JSON_SIZE
from app.tools.builtin_tools.word_counter import MAX_TEXT_LENGTH


@pytest.fixture
def registry():
    return create_builtin_registry()


# =============================================================================
# Word Counter
# =============================================================================


class TestWordCounter:
    def test_counts_sentence(self, registry) -> None:
        result = registry.execute("word-counter", {"text": "Hello world! This is a test."})
        assert result == {
            "words": 6,
            "characters": 28,
            "characters_no_spaces": 23,
            "lines": 1,
            "paragraphs": 1,
        }

    def test_empty_text(self, registry) -> None:
        result = registry.execute("word-counter", {"text": ""})
        assert result["words"] == 0
        assert result["characters"] == 0
        assert result["lines"] == 1
        assert result["paragraphs"] == 0

    def test_missing_text_defaults_to_empty(self, registry) -> None:
        assert registry.execute("word-counter", {})["words"] == 0

    def test_lines_and_paragraphs(self, registry) -> None:
        text = "first line\nsecond line\n\nnew paragraph\n\n\n   \n\nlast"
        result = registry.execute("word-counter", {"text": text})
        assert result["lines"] == text.count("\n") + 1
        assert result["paragraphs"] == 3

    def test_only_ascii_spaces_removed(self, registry) -> None:
        result = registry.execute("word-counter", {"text": "a b\tc\nd"})
        assert result["characters"] == 7
        assert result["characters_no_spaces"] == 6
        assert result["words"] == 4

    def test_text_over_configured_cap(self, registry) -> None:
        assert registry.execute("word-counter", {"text": "abcde"}, {"max_text_length": 5})["words"] == 1
        result = registry.execute("word-counter", {"text": "abcdef"}, {"max_text_length": 5})
        assert result == {"error": "Text exceeds maximum length of 5 characters"}

    def test_configured_cap_cannot_exceed_hard_cap(self, registry) -> None:
        text = "a" * (MAX_TEXT_LENGTH + 1)
        result = registry.execute("word-counter", {"text": text}, {"max_text_length": 10 * MAX_TEXT_LENGTH})
        assert result == {"error": f"Text exceeds maximum length of {MAX_TEXT_LENGTH} characters"}

    def test_non_string_text_is_invalid_input(self, registry) -> None:
        result = registry.execute("word-counter", {"text": ["not", "text"]})
        assert result["error"].startswith("Invalid input")


# =============================================================================
# JSON Formatter
# =============================================================================


class TestJsonFormatter:
    def test_formats_valid_document(self, registry) -> None:
        result = registry.execute("json-formatter", {"json": '{"a":1,"b":[1,2]}'})
        assert result["valid"] is True
        assert result["minified"] == '{"a":1,"b":[1,2]}'
        assert result["formatted"] == '{\n  "a": 1,\n  "b": [\n    1,\n    2\n  ]\n}'
        assert result["size_original"] == 17
        assert result["size_minified"] == 17
        assert result["size_formatted"] == len(result["formatted"])

    def test_custom_indent(self, registry) -> None:
        result = registry.execute("json-formatter", {"json": '{"a": 1}', "indent": 2})
        assert result["formatted"] == '{\n  "a": 1\n}'

    def test_configured_indent_is_default(self, registry) -> None:
        result = registry.execute("json-formatter", {"json": '{"a": 1}'}, {"indent_size": 4})
        assert result["formatted"] == '{\n    "a": 1\n}'

        result = registry.execute("json-formatter", {"json": '{"a": 1}', "indent": 1}, {"indent_size": 4})
        assert result["formatted"] == '{\n "a": 1\n}'

    def test_input_over_configured_cap(self, registry) -> None:
        result = registry.execute("json-formatter", {"json": "[1,2,3]"}, {"max_json_size": 5})
        assert result == {"error": "JSON exceeds maximum size of 5 bytes", "valid": False}

    def test_input_over_hard_cap(self, registry) -> None:
        document = "[" + "1," * (MAX_JSON_SIZE // 2) + "1]"
        result = registry.execute("json-formatter", {"json": document}, {"max_json_size": 10 * MAX_JSON_SIZE})
        assert result == {
            "error": f"JSON exceeds maximum size of {MAX_JSON_SIZE} bytes",
            "valid": False,
        }

    def test_formatted_output_over_cap(self, registry) -> None:
        # 400 字节的深层嵌套，美化后约 80KB
        document = "[" * 200 + "]" * 200
        result = registry.execute("json-formatter", {"json": document}, {"max_json_size": 10_000})
        assert result == {
            "error": "Formatted JSON exceeds maximum size of 10000 bytes",
            "valid": False,
        }

        result = registry.execute("json-formatter", {"json": document})
        assert result["valid"] is True
        assert result["size_formatted"] == len(result["formatted"]) == 80_000

    def test_wide_deep_document_is_rejected(self, registry) -> None:
        # 约 90KB 输入，若直接美化会生成上百 MB
        document = "[" + ",".join(["[" * 900 + "]" * 900] * 50) + "]"
        assert len(document) < MAX_JSON_SIZE
        result = registry.execute("json-formatter", {"json": document})
        assert result["valid"] is False
        assert set(result) == {"error", "valid"}

    def test_formatted_size_matches_output(self, registry) -> None:
        document = '{"名": [{"x": []}, {}, "é"], "y": {"z": [1, {"w": null}]}}'
        for indent in (1, 3, 8):
            result = registry.execute("json-formatter", {"json": document, "indent": indent})
            assert result["size_formatted"] == len(result["formatted"].encode("utf-8"))

    def test_indent_out_of_range_is_invalid_input(self, registry) -> None:
        result = registry.execute("json-formatter", {"json": "{}", "indent": 0})
        assert result["error"].startswith("Invalid input")

    def test_invalid_json_has_no_sizes(self, registry) -> None:
        result = registry.execute("json-formatter", {"json": "{invalid json"})
        assert result["valid"] is False
        assert result["error"]
        assert set(result) == {"error", "valid"}

    def test_nan_literal_rejected(self, registry) -> None:
        result = registry.execute("json-formatter", {"json": "[NaN]"})
        assert result["valid"] is False

    def test_sizes_are_utf8_bytes(self, registry) -> None:
        result = registry.execute("json-formatter", {"json": '{"k": "中文"}'})
        assert result["minified"] == '{"k":"中文"}'
        assert result["size_minified"] == len('{"k":"中文"}'.encode("utf-8"))
        assert result["size_original"] == len('{"k": "中文"}'.encode("utf-8"))

    def test_missing_json_is_invalid_input(self, registry) -> None:
        result = registry.execute("json-formatter", {})
        assert result["error"].startswith("Invalid input")


# =============================================================================
# Color Palette
# =============================================================================


class TestColorPalette:
    def test_red_palette(self, registry) -> None:
        result = registry.execute("color-palette", {"base_color": "#FF0000"})
        assert result["palette"] == {
            "primary": "#FF0000",
            "lighter": "#ff2828",
            "darker": "#d70000",
            "complement": "#00ffff",
            "triad1": "#0000ff",
            "triad2": "#00ff00",
        }

    def test_surrounding_whitespace_stripped(self, registry) -> None:
        result = registry.execute("color-palette", {"base_color": " \t#FF0000\n"})
        assert result["palette"]["primary"] == "#FF0000"
        assert result["palette"]["complement"] == "#00ffff"

    def test_invalid_color(self, registry) -> None:
        for value in ("FF0000", "#FFF", "#GG0000", "red"):
            assert registry.execute("color-palette", {"base_color": value}) == {
                "error": "Invalid color format"
            }

    def test_parse_and_format_helpers(self) -> None:
        assert parse_hex("#1a2B3c") == (0x1A, 0x2B, 0x3C)
        assert parse_hex("#12345") is None
        assert to_hex((0, 128, 255)) == "#0080ff"


# =============================================================================
# Calculator
# =============================================================================


class TestCalculatorOperations:
    @pytest.mark.parametrize(
        "operation,num1,num2,result,formatted",
        [
            ("add", 5, 3, 8, "5 + 3 = 8"),
            ("subtract", 5, 3, 2, "5 - 3 = 2"),
            ("multiply", 4, 2.5, 10, "4 × 2.5 = 10"),
            ("divide", 10, 4, 2.5, "10 ÷ 4 = 2.5"),
            ("power", 2, 10, 1024, "2^10 = 1024"),
            ("sqrt", 16, 0, 4, "√16 = 4"),
            ("percentage", 50, 200, 100, "50% of 200 = 100"),
        ],
    )
    def test_operation(self, registry, operation, num1, num2, result, formatted) -> None:
        response = registry.execute(
            "calculator", {"operation": operation, "num1": num1, "num2": num2}
        )
        assert response["result"] == result
        assert response["formatted"] == formatted
        assert response["operation"] == operation
        assert response["operands"] == [num1, num2]

    def test_divide_by_zero(self, registry) -> None:
        response = registry.execute("calculator", {"operation": "divide", "num1": 1, "num2": 0})
        assert response == {"error": "Cannot divide by zero"}

    def test_negative_sqrt(self, registry) -> None:
        response = registry.execute("calculator", {"operation": "sqrt", "num1": -4})
        assert response == {"error": "Cannot calculate square root of negative number"}

    def test_unknown_operation(self, registry) -> None:
        response = registry.execute("calculator", {"operation": "modulo", "num1": 1, "num2": 2})
        assert response == {"error": "Unknown operation"}

    def test_missing_operation(self, registry) -> None:
        assert registry.execute("calculator", {}) == {"error": "Unknown operation"}

    def test_overflow(self, registry) -> None:
        response = registry.execute("calculator", {"operation": "power", "num1": 10, "num2": 400})
        assert response == {"error": "Result is too large"}

    def test_huge_integer_product(self, registry) -> None:
        response = registry.execute(
            "calculator", {"operation": "multiply", "num1": 10**3000, "num2": 10**3000}
        )
        assert response == {"error": "Result is too large"}

        response = registry.execute("calculator", {"operation": "multiply", "num1": 2**600, "num2": 2**600})
        assert response == {"error": "Result is too large"}


class TestCalculatorExpression:
    def test_precedence(self, registry) -> None:
        response = registry.execute("calculator", {"expression": "2 + 3 * 4"})
        assert response == {"result": 14, "expression": "2 + 3 * 4", "formatted": "2 + 3 * 4 = 14"}

    def test_expression_takes_priority_over_operation(self, registry) -> None:
        response = registry.execute(
            "calculator", {"expression": "(1 + 2) * 3", "operation": "add", "num1": 1, "num2": 1}
        )
        assert response["result"] == 9

    def test_disallowed_characters_are_stripped(self, registry) -> None:
        response = registry.execute("calculator", {"expression": "1 + 1; import os"})
        assert response["result"] == 2
        assert response["expression"] == "1 + 1"

    def test_code_is_never_executed(self, registry) -> None:
        response = registry.execute("calculator", {"expression": "__import__('os')"})
        assert response == {"error": "Invalid expression", "expression": "()"}

    def test_empty_after_filter_is_invalid(self, registry) -> None:
        response = registry.execute("calculator", {"expression": "abc"})
        assert response == {"error": "Invalid expression", "expression": ""}

    def test_division_by_zero(self, registry) -> None:
        response = registry.execute("calculator", {"expression": "1/0"})
        assert response == {"error": "Cannot divide by zero", "expression": "1/0"}

    def test_huge_integer_result(self, registry) -> None:
        expression = "9" * 300 + "*" + "9" * 200
        response = registry.execute("calculator", {"expression": expression})
        assert response == {"error": "Result is too large", "expression": expression}

    def test_malformed(self, registry) -> None:
        response = registry.execute("calculator", {"expression": "2 +* 3"})
        assert response["error"] == "Invalid expression"


# =============================================================================
# Todo List
# =============================================================================


class TestTodoList:
    def _todos(self) -> list[dict]:
        return [
            {"id": "a", "text": "write tests", "completed": False, "priority": "high"},
            {"id": "b", "text": "ship", "completed": True},
        ]

    def test_get_returns_stats(self, registry) -> None:
        response = registry.execute("todo-list", {"todos": self._todos()})
        assert response["stats"] == {"total": 2, "completed": 1, "remaining": 1}
        assert response["todos"][0]["priority"] == "high"

    def test_add(self, registry) -> None:
        response = registry.execute(
            "todo-list",
            {"action": "add", "todos": self._todos(), "text": "review", "priority": "low", "dueDate": "2026-01-01"},
        )
        added = response["todos"][-1]
        assert added["text"] == "review"
        assert added["completed"] is False
        assert added["priority"] == "low"
        assert added["dueDate"] == "2026-01-01"
        assert len(added["id"]) == 13
        assert response["stats"] == {"total": 3, "completed": 1, "remaining": 2}

    def test_toggle(self, registry) -> None:
        response = registry.execute("todo-list", {"action": "toggle", "todos": self._todos(), "todoId": "a"})
        assert response["todos"][0]["completed"] is True
        assert response["stats"]["completed"] == 2

    def test_toggle_accepts_numeric_id(self, registry) -> None:
        todos = [{"id": 7, "text": "x", "completed": False}]
        response = registry.execute("todo-list", {"action": "toggle", "todos": todos, "todoId": 7})
        assert response["todos"][0] == {"id": "7", "text": "x", "completed": True}

    def test_delete(self, registry) -> None:
        response = registry.execute("todo-list", {"action": "delete", "todos": self._todos(), "todoId": "b"})
        assert [t["id"] for t in response["todos"]] == ["a"]

    def test_clear_completed(self, registry) -> None:
        response = registry.execute("todo-list", {"action": "clear_completed", "todos": self._todos()})
        assert [t["id"] for t in response["todos"]] == ["a"]
        assert response["stats"] == {"total": 1, "completed": 0, "remaining": 1}

    def test_unknown_action_passes_through(self, registry) -> None:
        response = registry.execute("todo-list", {"action": "archive", "todos": self._todos()})
        assert response == {
            "todos": self._todos(),
            "stats": {"total": 2, "completed": 1, "remaining": 1},
        }
