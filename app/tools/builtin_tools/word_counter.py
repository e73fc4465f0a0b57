"""
WordCounterTool：文本统计

- words：按空白切分的 token 数
- characters：原始长度
- characters_no_spaces：只去掉半角空格（换行、制表符仍计入）
- lines：换行符个数 + 1
- paragraphs：按空行（\\n\\n）切分后非空白块的个数

文本长度上限取工具配置 max_text_length，且不超过 MAX_TEXT_LENGTH。
"""

from typing import Any, Mapping

from pydantic import BaseModel, Field

from app.tools.base import BaseTool, ToolResult

MAX_TEXT_LENGTH = 50_000


class _Params(BaseModel):
    text: str = Field(default="", description="待统计文本")


class WordCounterTool(BaseTool):

    @property
    def slug(self) -> str:
        return "word-counter"

    @property
    def params_model(self) -> type[BaseModel]:
        return _Params

    def execute(self, params: _Params, config: Mapping[str, Any]) -> ToolResult:
        text = params.text
        limit = min(config.get("max_text_length", MAX_TEXT_LENGTH), MAX_TEXT_LENGTH)
        if len(text) > limit:
            return ToolResult.fail(f"Text exceeds maximum length of {limit} characters")

        return ToolResult.success(
            words=len(text.split()),
            characters=len(text),
            characters_no_spaces=len(text.replace(" ", "")),
            lines=text.count("\n") + 1,
            paragraphs=sum(1 for block in text.split("\n\n") if block.strip()),
        )
