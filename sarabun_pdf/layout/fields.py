"""
字段渲染器 - 标签 + 值 + 点线下划线

两种形式：
1. 通栏字段：绘制标签，值按剩余行宽折行，每行下方绘制点线（值起点 → 右边距）；
   值为空时仍绘制一条空点线（供手工填写）
2. 同行双字段：两个字段共用一行，值不折行，各自点线止于调用方给定的 x，互不重叠

返回字段之后的新基线。

测试要点：
- test_empty_value_draws_rule: 空值仍有一条非零长度点线
- test_wrapped_value_rules: 折行后每行一条点线
- test_dual_field_rules_do_not_overlap: 双字段点线不重叠
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..models import FieldSpec
from .constants import (
    DOTTED_RULE_DASH,
    DOTTED_RULE_OFFSET,
    FONT_SIZE_FIELD,
    FONT_SIZE_FIELD_VALUE,
    MARGIN_LEFT,
    MARGIN_RIGHT,
    PAGE_WIDTH,
    TEXT_LINE_GAP,
)

if TYPE_CHECKING:
    from .page_flow import PageFlowController
    from .text_flow import TextFlowEngine

RIGHT_EDGE_X = PAGE_WIDTH - MARGIN_RIGHT


def sanitize_single_line(text: str | None) -> str:
    """换行/回车转空格，制表符转4空格"""
    if not text:
        return ""
    return text.replace("\r\n", " ").replace("\n", " ").replace("\r", " ").replace("\t", "    ")


class FieldLayoutRenderer:
    """字段渲染器"""

    def __init__(
        self,
        flow: PageFlowController,
        text_flow: TextFlowEngine,
        label_font: str,
        value_font: str,
        label_size: float = FONT_SIZE_FIELD,
        value_size: float = FONT_SIZE_FIELD_VALUE,
    ):
        self.flow = flow
        self.text_flow = text_flow
        self.label_font = label_font
        self.value_font = value_font
        self.label_size = label_size
        self.value_size = value_size

    @property
    def row_height(self) -> float:
        return max(self.label_size, self.value_size) + TEXT_LINE_GAP

    def value_x(self, label: str, x: float) -> float:
        return x + self.text_flow.width(f"{label} ", self.label_font, self.label_size)

    def draw_field(self, label: str, value: str | None, x: float = MARGIN_LEFT) -> float:
        """通栏字段，返回新基线"""
        canvas = self.flow.canvas
        value_x = self.value_x(label, x)
        max_width = RIGHT_EDGE_X - value_x
        lines = self.text_flow.wrap(
            sanitize_single_line(value), self.value_font, self.value_size, max_width
        ) or [""]

        line_step = self.value_size + TEXT_LINE_GAP
        for i, line in enumerate(lines):
            # 首行与标签同行，按较大字号申请空间
            y = self.flow.request_space(self.row_height if i == 0 else line_step)
            if i == 0:
                canvas.setFont(self.label_font, self.label_size)
                canvas.drawString(x, y, f"{label} ")
            if line:
                canvas.setFont(self.value_font, self.value_size)
                canvas.drawString(value_x, y, line)
            self.draw_dotted_rule(value_x, RIGHT_EDGE_X, y)
            self.flow.advance(line_step)

        return self.flow.current_y

    def draw_dual_field(self, left: FieldSpec, right: FieldSpec | None = None) -> float:
        """同行双字段（值不折行），返回新基线"""
        y = self.flow.request_space(self.row_height)

        left_end = left.rule_end_x if left.rule_end_x is not None else RIGHT_EDGE_X
        if right is not None:
            left_end = min(left_end, right.x)
        self._draw_fixed(left, y, left_end)

        if right is not None:
            right_end = right.rule_end_x if right.rule_end_x is not None else RIGHT_EDGE_X
            self._draw_fixed(right, y, right_end)

        return self.flow.advance(self.row_height)

    def draw_fixed_field(self, field: FieldSpec) -> float:
        """单个不折行字段"""
        return self.draw_dual_field(field)

    def draw_dotted_rule(self, x1: float, x2: float, baseline: float) -> None:
        canvas = self.flow.canvas
        canvas.saveState()
        canvas.setDash(*DOTTED_RULE_DASH)
        canvas.setLineWidth(1)
        canvas.line(x1, baseline - DOTTED_RULE_OFFSET, x2, baseline - DOTTED_RULE_OFFSET)
        canvas.restoreState()

    def _draw_fixed(self, field: FieldSpec, y: float, rule_end_x: float) -> None:
        canvas = self.flow.canvas
        canvas.setFont(self.label_font, self.label_size)
        canvas.drawString(field.x, y, f"{field.label} ")

        value_x = self.value_x(field.label, field.x)
        value = sanitize_single_line(field.value)
        if value:
            canvas.setFont(self.value_font, self.value_size)
            canvas.drawString(value_x, y, value)
        self.draw_dotted_rule(value_x, max(rule_end_x, value_x), y)
