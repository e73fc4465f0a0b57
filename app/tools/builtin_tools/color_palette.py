"""
ColorPaletteTool：基于基础色生成配色

lighter / darker：各通道 ±40 并截断到 [0, 255]
complement：255 - 通道值
triad1 / triad2：通道轮换 (g, b, r) / (b, r, g)
输出统一为小写 #rrggbb，primary 回显去掉首尾空白后的输入。
"""

import re
from typing import Any, Mapping

from pydantic import BaseModel, Field

from app.tools.base import BaseTool, ToolResult

_HEX_RE = re.compile(r"^#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")
SHADE_STEP = 40

RGB = tuple[int, int, int]


class _Params(BaseModel):
    base_color: str = Field(description="基础色，#RRGGBB")


def parse_hex(value: str) -> RGB | None:
    match = _HEX_RE.match(value)
    if not match:
        return None
    r, g, b = (int(part, 16) for part in match.groups())
    return r, g, b


def to_hex(rgb: RGB) -> str:
    r, g, b = rgb
    return f"#{r:02x}{g:02x}{b:02x}"


def _clamp(channel: int) -> int:
    return max(0, min(255, channel))


class ColorPaletteTool(BaseTool):

    @property
    def slug(self) -> str:
        return "color-palette"

    @property
    def params_model(self) -> type[BaseModel]:
        return _Params

    def execute(self, params: _Params, config: Mapping[str, Any]) -> ToolResult:
        base_color = params.base_color.strip()
        rgb = parse_hex(base_color)
        if rgb is None:
            return ToolResult.fail("Invalid color format")

        r, g, b = rgb
        return ToolResult.success(
            palette={
                "primary": base_color,
                "lighter": to_hex((_clamp(r + SHADE_STEP), _clamp(g + SHADE_STEP), _clamp(b + SHADE_STEP))),
                "darker": to_hex((_clamp(r - SHADE_STEP), _clamp(g - SHADE_STEP), _clamp(b - SHADE_STEP))),
                "complement": to_hex((255 - r, 255 - g, 255 - b)),
                "triad1": to_hex((g, b, r)),
                "triad2": to_hex((b, r, g)),
            }
        )
