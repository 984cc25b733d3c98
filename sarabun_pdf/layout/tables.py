"""
表格引擎 - HTML 表格片段 → 网格模型 → 逐行分页绘制

职责：
1. 解析 <table>：th/td、colspan/rowspan（缺省或非法为1）、表头标记
2. 列宽 = 总宽 / 列数（等分；单元格起始列跳过上方跨行占用的列）
3. 行高 = max(最小行高, 本行起始单元格的 行数 × (字号+2) + 2×内边距)
4. 每行绘制前向分页控制器申请行高；跨页续排时不重复表头
5. 混排正文按原文顺序拆分为文字段与表格段

依赖：
- beautifulsoup4: HTML 解析
- reportlab: canvas 绘制

测试要点：
- test_parse_spans: colspan/rowspan 解析与默认值
- test_column_widths_sum: 列宽之和等于总宽
- test_row_break_before_second_row: 第2行放不下时恰好在其前换页一次
- test_split_preserves_order: 文字/表格分段顺序与原文一致
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup, Comment, NavigableString, Tag
from pydantic import BaseModel, Field

from ..models import ContentPart, ContentPartType, TableCell, TableModel, TableRow
from .constants import (
    MARGIN_LEFT,
    TABLE_BORDER_WIDTH,
    TABLE_CELL_PADDING,
    TABLE_FONT_SIZE,
    TABLE_HEADER_GRAY,
    TABLE_LINE_SPACING,
    TABLE_MIN_ROW_HEIGHT,
    TABLE_SPACING_AFTER,
)

if TYPE_CHECKING:
    from reportlab.pdfgen.canvas import Canvas

    from .page_flow import PageFlowController
    from .text_flow import TextFlowEngine

logger = logging.getLogger(__name__)


class RowPlacement(BaseModel):
    """行落位记录"""
    row_index: int
    page_number: int
    top: float
    height: float


class TableRenderResult(BaseModel):
    """表格绘制结果"""
    y: float
    placements: list[RowPlacement] = Field(default_factory=list)

    @property
    def page_breaks(self) -> int:
        pages = [p.page_number for p in self.placements]
        return sum(1 for a, b in zip(pages, pages[1:]) if b != a)


# ============================================================================
# 解析
# ============================================================================

def _parse_span(value: str | list[str] | None) -> int:
    if isinstance(value, list):
        value = value[0] if value else None
    try:
        span = int(str(value).strip()) if value is not None else 1
    except ValueError:
        return 1
    return span if span >= 1 else 1


def parse_table(html: str, total_width: float) -> TableModel | None:
    """解析第一个 <table> 为网格模型；没有表格返回 None"""
    soup = BeautifulSoup(html, "html.parser")
    table = soup.find("table")
    if table is None:
        logger.warning("HTML中未找到表格")
        return None

    rows: list[TableRow] = []
    carry: dict[int, int] = {}  # 列 → 仍被上方单元格占用的行数
    column_count = 0

    for tr in table.find_all("tr"):
        if tr.find_parent("table") is not table:
            continue  # 嵌套表格的行

        occupied = set(carry)
        new_spans: dict[int, int] = {}
        cells: list[TableCell] = []
        col = 0
        for td in tr.find_all(["td", "th"], recursive=False):
            while col in occupied:
                col += 1
            colspan = _parse_span(td.get("colspan"))
            rowspan = _parse_span(td.get("rowspan"))
            cells.append(TableCell(
                text=td.get_text(" ", strip=True),
                colspan=colspan,
                rowspan=rowspan,
                is_header=td.name == "th",
                column_index=col,
            ))
            if rowspan > 1:
                for c in range(col, col + colspan):
                    new_spans[c] = rowspan - 1
            col += colspan

        used = max([col, *(c + 1 for c in occupied)]) if occupied else col
        column_count = max(column_count, used)
        rows.append(TableRow(cells=cells))

        carry = {c: n - 1 for c, n in carry.items() if n > 1}
        carry.update(new_spans)

    if column_count == 0:
        return TableModel(rows=rows, column_widths=[], total_width=total_width)

    unit = total_width / column_count
    widths = [unit] * (column_count - 1)
    widths.append(total_width - sum(widths))
    return TableModel(rows=rows, column_widths=widths, total_width=total_width)


def contains_table(html: str | None) -> bool:
    return bool(html) and "<table" in html.lower()


def split_html_content(html: str | None) -> list[ContentPart]:
    """
    按原文顺序把混排正文拆成文字段与表格段

    表格外的块级元素各占一行；包含表格的容器元素会被展开。
    """
    if not html:
        return []

    soup = BeautifulSoup(html, "html.parser")
    parts: list[ContentPart] = []
    buffer: list[str] = []

    def flush() -> None:
        text = "\n".join(buffer).strip()
        if text:
            parts.append(ContentPart(type=ContentPartType.TEXT, content=text))
        buffer.clear()

    def walk(node: Tag | BeautifulSoup) -> None:
        for child in node.children:
            if isinstance(child, Comment):
                continue
            if isinstance(child, NavigableString):
                text = child.strip()
                if text:
                    buffer.append(text)
            elif isinstance(child, Tag):
                if child.name == "table":
                    flush()
                    parts.append(ContentPart(type=ContentPartType.TABLE, content=str(child)))
                elif child.find("table") is not None:
                    walk(child)
                elif child.name in ("script", "style"):
                    continue
                else:
                    text = child.get_text(" ", strip=True)
                    if text:
                        buffer.append(text)

    walk(soup.body if soup.body is not None else soup)
    flush()
    return parts


# ============================================================================
# 绘制
# ============================================================================

class TableLayoutEngine:
    """表格版面引擎"""

    def __init__(
        self,
        flow: PageFlowController,
        text_flow: TextFlowEngine,
        font: str,
        bold_font: str,
        font_size: float = TABLE_FONT_SIZE,
        padding: float = TABLE_CELL_PADDING,
        min_row_height: float = TABLE_MIN_ROW_HEIGHT,
    ):
        self.flow = flow
        self.text_flow = text_flow
        self.font = font
        self.bold_font = bold_font
        self.font_size = font_size
        self.padding = padding
        self.min_row_height = min_row_height

    @property
    def line_height(self) -> float:
        return self.font_size + TABLE_LINE_SPACING

    def cell_font(self, cell: TableCell) -> str:
        return self.bold_font if cell.is_header else self.font

    def cell_lines(self, model: TableModel, cell: TableCell) -> list[str]:
        inner = model.cell_width(cell) - 2 * self.padding
        return self.text_flow.wrap(cell.text, self.cell_font(cell), self.font_size, inner) or [""]

    def row_heights(self, model: TableModel) -> list[float]:
        """每行高度（只计本行起始的单元格）"""
        heights = []
        for row in model.rows:
            height = self.min_row_height
            for cell in row.cells:
                lines = self.cell_lines(model, cell)
                height = max(height, len(lines) * self.line_height + 2 * self.padding)
            heights.append(height)
        return heights

    def render_html(self, html: str, total_width: float, x: float = MARGIN_LEFT) -> TableRenderResult:
        model = parse_table(html, total_width)
        if model is None:
            return TableRenderResult(y=self.flow.current_y)
        return self.render(model, x)

    def render(self, model: TableModel, x: float = MARGIN_LEFT) -> TableRenderResult:
        """逐行绘制，行为分页原子单元"""
        if not model.rows or not model.column_widths:
            return TableRenderResult(y=self.flow.current_y)

        heights = self.row_heights(model)
        spans = self._continuations(model)
        placements: list[RowPlacement] = []

        for index, (row, height) in enumerate(zip(model.rows, heights)):
            page_before = self.flow.page_number
            top = self.flow.request_space(height)
            page_break = self.flow.page_number != page_before
            if page_break and index > 0:
                logger.info(f"表格第{index + 1}行续排至第{self.flow.page_number}页")

            for cell in row.cells:
                self._draw_cell(model, cell, x, top, height, top_edge=True, bottom_edge=cell.rowspan == 1)
            for cell, is_last in spans[index]:
                self._draw_cell(
                    model, cell, x, top, height,
                    top_edge=page_break, bottom_edge=is_last, with_text=False,
                )

            placements.append(RowPlacement(
                row_index=index, page_number=self.flow.page_number, top=top, height=height,
            ))
            self.flow.advance(height)

        self.flow.advance(TABLE_SPACING_AFTER)
        return TableRenderResult(y=self.flow.current_y, placements=placements)

    def _continuations(self, model: TableModel) -> list[list[tuple[TableCell, bool]]]:
        """每行中被上方跨行单元格延续占用的单元格 (cell, 是否最后一行)"""
        result: list[list[tuple[TableCell, bool]]] = [[] for _ in model.rows]
        for start, row in enumerate(model.rows):
            for cell in row.cells:
                last = min(start + cell.rowspan, len(model.rows)) - 1
                for r in range(start + 1, last + 1):
                    result[r].append((cell, r == last))
        return result

    def _draw_cell(
        self,
        model: TableModel,
        cell: TableCell,
        table_x: float,
        top: float,
        height: float,
        top_edge: bool,
        bottom_edge: bool,
        with_text: bool = True,
    ) -> None:
        canvas: Canvas = self.flow.canvas
        x = table_x + model.cell_x(cell)
        width = model.cell_width(cell)
        bottom = top - height

        canvas.saveState()
        if cell.is_header:
            canvas.setFillGray(TABLE_HEADER_GRAY)
            canvas.rect(x + 0.5, bottom + 0.5, width - 1, height - 1, stroke=0, fill=1)
            canvas.setFillGray(0)

        canvas.setLineWidth(TABLE_BORDER_WIDTH)
        canvas.setStrokeGray(0)
        canvas.line(x, bottom, x, top)
        canvas.line(x + width, bottom, x + width, top)
        if top_edge:
            canvas.line(x, top, x + width, top)
        if bottom_edge:
            canvas.line(x, bottom, x + width, bottom)
        canvas.restoreState()

        if not with_text:
            return

        canvas.setFont(self.cell_font(cell), self.font_size)
        text_y = top - self.padding - self.font_size
        for line in self.cell_lines(model, cell):
            if line:
                canvas.drawString(x + self.padding, text_y, line)
            text_y -= self.line_height
