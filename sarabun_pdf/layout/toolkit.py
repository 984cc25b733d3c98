"""
版面工具集 - 每份文档一个实例，组合分页/字段/表格/签名能力

各类公文生成器通过组合本工具集绘制版面，不再依赖公共基类。

职责：
1. 持有本文档的 canvas、字体句柄、分页控制器（当前页写入器归分页控制器所有）
2. 文字/段落/混排正文/急件标记/分隔线等常用绘制
3. finish(): 关闭最后一页 → 保存 → 写入签名域 → bytes（文档只关闭一次）

用法：
    with LayoutToolkit(fonts, book_no="ศธ 0001/1") as kit:
        kit.start()
        kit.draw_paragraphs("...")
        pdf_bytes = kit.finish()
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import TYPE_CHECKING

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen.canvas import Canvas

from ..config import LayoutConfig
from ..interfaces import LayoutError
from ..models import ContentPart, RoleTag, SignerInfo
from .constants import (
    CONTENT_WIDTH,
    FONT_SIZE_CONTENT,
    FONT_SIZE_SPEED_LAYER,
    MARGIN_LEFT,
    MARGIN_RIGHT,
    MARGIN_TOP,
    PAGE_HEIGHT,
    PAGE_WIDTH,
    SEPARATOR_DASH,
    SEPARATOR_GRAY,
    SEPARATOR_INSET,
    TEXT_LINE_GAP,
)
from .fields import FieldLayoutRenderer
from .page_flow import PageFlowController, PageFurniture
from .signature import FormFieldRegistry, SignatureFieldPlacer, apply_form_fields
from .tables import TableLayoutEngine
from .text_flow import TextFlowEngine

if TYPE_CHECKING:
    from .fonts import DocumentFonts

logger = logging.getLogger(__name__)

SEPARATOR_GAP_ABOVE = 15.0
SEPARATOR_GAP_BELOW = 30.0


class LayoutToolkit:
    """单份文档的版面工具集"""

    def __init__(
        self,
        fonts: DocumentFonts,
        book_no: str | None = "",
        page_number_offset: int = 0,
        layout: LayoutConfig | None = None,
        text_flow: TextFlowEngine | None = None,
        title: str | None = None,
    ):
        layout = layout or LayoutConfig()
        self.fonts = fonts
        self.buffer = BytesIO()
        self.canvas = Canvas(self.buffer, pagesize=A4)
        if title:
            self.canvas.setTitle(title)

        self.text_flow = text_flow or TextFlowEngine()
        self.furniture = PageFurniture(fonts.regular, book_no, debug_borders=layout.debug_borders)
        self.flow = PageFlowController(self.canvas, self.furniture, page_number_offset=page_number_offset)
        self.fields = FieldLayoutRenderer(self.flow, self.text_flow, fonts.bold, fonts.regular)
        self.tables = TableLayoutEngine(self.flow, self.text_flow, fonts.regular, fonts.bold)
        self.registry = FormFieldRegistry(dedupe=layout.field_name_dedupe)
        self.signatures = SignatureFieldPlacer(self.flow, self.text_flow, fonts, self.registry)
        self._finished = False

    # ------------------------------------------------------------------
    # 生命周期
    # ------------------------------------------------------------------

    def __enter__(self) -> LayoutToolkit:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._finished:
            self.close()

    @property
    def y(self) -> float:
        return self.flow.current_y

    @property
    def field_names(self) -> list[str]:
        return self.registry.field_names

    def start(self, top_y: float | None = None) -> float:
        return self.flow.start(top_y)

    def new_page(self) -> float:
        return self.flow.new_page()

    def skip(self, height: float) -> float:
        return self.flow.advance(height)

    def close(self) -> None:
        """放弃文档（异常路径），只关闭写入器"""
        self.flow.close()
        self._finished = True

    def finish(self) -> bytes:
        """关闭最后一页、保存并写入签名域"""
        if self._finished:
            raise LayoutError("文档已完成，不能重复输出")
        if self.flow.page_count == 0:
            self.flow.start()
        self.flow.close()
        self.canvas.save()
        self._finished = True

        pdf_bytes = self.buffer.getvalue()
        logger.debug(f"文档输出 {self.flow.page_count}页, 签名域 {len(self.registry.slots)}个")
        return apply_form_fields(pdf_bytes, self.registry.slots)

    # ------------------------------------------------------------------
    # 文字
    # ------------------------------------------------------------------

    def font(self, bold: bool = False) -> str:
        return self.fonts.bold if bold else self.fonts.regular

    def draw_text(self, text: str, x: float = MARGIN_LEFT, size: float = FONT_SIZE_CONTENT, bold: bool = False) -> float:
        """单行文字，返回 y - size - 5"""
        y = self.flow.request_space(size + TEXT_LINE_GAP)
        self.canvas.setFont(self.font(bold), size)
        self.canvas.drawString(x, y, text)
        return self.flow.advance(size + TEXT_LINE_GAP)

    def draw_text_at(self, text: str, x: float, y: float, size: float = FONT_SIZE_CONTENT, bold: bool = False) -> float:
        """在固定位置绘制（不移动游标），返回 y - size - 5"""
        self.canvas.setFont(self.font(bold), size)
        self.canvas.drawString(x, y, text)
        return y - size - TEXT_LINE_GAP

    def draw_hanging_text(
        self,
        prefix: str,
        text: str | None,
        x: float = MARGIN_LEFT,
        size: float = FONT_SIZE_CONTENT,
    ) -> float:
        """前缀 + 文字；折行及后续段落对齐到前缀之后"""
        indent = self.text_flow.width(prefix, self.fonts.regular, size)
        first, _, rest = (text or "").partition("\n")
        self.draw_paragraphs(prefix + first, x=x, size=size, continuation_indent=indent)
        if rest:
            self.draw_paragraphs(rest, x=x + indent, size=size)
        return self.flow.current_y

    def draw_centered_text(
        self,
        text: str,
        size: float = FONT_SIZE_CONTENT,
        bold: bool = False,
        gap: float | None = None,
        center_x: float = PAGE_WIDTH / 2,
    ) -> float:
        """居中单行文字；gap 为绘制后游标下移量（缺省 size + 5）"""
        advance = size + TEXT_LINE_GAP if gap is None else gap
        y = self.flow.request_space(max(advance, size))
        self.canvas.setFont(self.font(bold), size)
        self.canvas.drawCentredString(center_x, y, text)
        return self.flow.advance(advance)

    def draw_paragraphs(
        self,
        text: str | None,
        x: float = MARGIN_LEFT,
        size: float = FONT_SIZE_CONTENT,
        max_width: float | None = None,
        bold: bool = False,
        first_indent: float = 0.0,
        continuation_indent: float = 0.0,
    ) -> float:
        """
        多段文字：逐段折行，每行作为原子单元申请空间

        行高 = 字号 + 10；首行从 x + first_indent 起，续行从 x + continuation_indent 起。
        """
        if not text:
            return self.flow.current_y

        font = self.font(bold)
        width = max_width if max_width is not None else PAGE_WIDTH - MARGIN_RIGHT - x
        line_height = size + 2 * TEXT_LINE_GAP

        for paragraph in text.split("\n"):
            lines = self.text_flow.wrap(
                paragraph, font, size, width,
                first_indent=first_indent, continuation_indent=continuation_indent,
            ) or [""]  # 空段落占一行
            for i, line in enumerate(lines):
                y = self.flow.request_space(line_height)
                if line:
                    self.canvas.setFont(font, size)
                    self.canvas.drawString(x + (first_indent if i == 0 else continuation_indent), y, line)
                self.flow.advance(line_height)
        return self.flow.current_y

    def draw_mixed_content(self, parts: list[ContentPart], x: float = MARGIN_LEFT, size: float = FONT_SIZE_CONTENT) -> float:
        """按原文顺序绘制文字段与表格段"""
        for part in parts:
            if part.is_table:
                self.tables.render_html(part.content, CONTENT_WIDTH, x)
            else:
                self.draw_paragraphs(part.content, x=x, size=size)
        return self.flow.current_y

    def draw_speed_layer(self, text: str | None) -> None:
        """急件标记（红色，右上角，不占用游标）"""
        if not text:
            return
        if self.flow.page_count == 0:
            self.flow.start()
        width = self.text_flow.width(text, self.fonts.bold, FONT_SIZE_SPEED_LAYER)
        self.canvas.saveState()
        self.canvas.setFillColor(colors.red)
        self.canvas.setFont(self.fonts.bold, FONT_SIZE_SPEED_LAYER)
        self.canvas.drawString(PAGE_WIDTH - MARGIN_RIGHT - width, PAGE_HEIGHT - MARGIN_TOP + 20, text)
        self.canvas.restoreState()

    def draw_separator(self) -> float:
        """签署人之间的灰色虚线，返回 线y - 30"""
        y = self.flow.request_space(SEPARATOR_GAP_ABOVE + SEPARATOR_GAP_BELOW)
        line_y = y - SEPARATOR_GAP_ABOVE
        self.canvas.saveState()
        self.canvas.setStrokeGray(SEPARATOR_GRAY)
        self.canvas.setDash(*SEPARATOR_DASH)
        self.canvas.setLineWidth(0.5)
        self.canvas.line(MARGIN_LEFT + SEPARATOR_INSET, line_y, PAGE_WIDTH - MARGIN_RIGHT - SEPARATOR_INSET, line_y)
        self.canvas.restoreState()
        return self.flow.advance_to(line_y - SEPARATOR_GAP_BELOW)

    # ------------------------------------------------------------------
    # 签名
    # ------------------------------------------------------------------

    def draw_signature(
        self,
        signer: SignerInfo | None,
        role: RoleTag,
        doc_index: int,
        signer_index: int,
        caption: str | None = None,
        force_caption_above: bool = False,
    ) -> float:
        return self.signatures.place(
            signer, role, doc_index, signer_index,
            caption=caption, force_caption_above=force_caption_above,
        )
