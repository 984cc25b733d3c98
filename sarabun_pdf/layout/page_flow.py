"""
分页控制器 - 跟踪当前页的垂直游标，空间不足时换页并绘制页面装饰

状态：
    ON_PAGE ──(空间不足)──> NEW_PAGE ──(装饰绘制完毕)──> ON_PAGE
    任意状态 ──close()──> CLOSED（终态）

职责：
1. request_space(height): currentY - height < minY 时关闭当前页写入器、开新页、绘制装饰、重置游标
2. 装饰：页码戳（泰文数字，仅文档首页省略）+ 文号戳（每页，包括首页）
3. 当前页写入器（reportlab canvas 的活动页）由控制器独占，外部不得自行换页
4. 游标在页内严格递减，只在新建页面时重置

依赖：
- reportlab: canvas

测试要点：
- test_break_when_insufficient: 空间不足时换页
- test_pagination_count: 累计高度超过一页时页数 ≥ ceil(total/usable)
- test_first_page_has_no_ordinal: 仅首页无页码戳
- test_oversized_unit_raises: 超过整页可用高度 → LayoutError
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from reportlab.lib import colors

from ..interfaces import LayoutError
from .constants import (
    BOOK_NUMBER_X,
    BOOK_NUMBER_Y,
    CONTINUATION_TOP_Y,
    FIRST_PAGE_TOP_Y,
    FONT_SIZE_CONTENT,
    FONT_SIZE_FIELD_VALUE,
    MARGIN_BOTTOM,
    MARGIN_LEFT,
    MARGIN_RIGHT,
    MARGIN_TOP,
    MIN_Y_POSITION,
    PAGE_HEIGHT,
    PAGE_NUMBER_Y_OFFSET,
    PAGE_WIDTH,
)
from .thai import page_ordinal_text

if TYPE_CHECKING:
    from reportlab.pdfgen.canvas import Canvas

logger = logging.getLogger(__name__)


class PageState(str, Enum):
    """分页状态"""
    ON_PAGE = "on_page"
    NEW_PAGE = "new_page"
    CLOSED = "closed"


class PageFurniture:
    """页面装饰：页码戳 + 文号戳"""

    def __init__(self, font: str, book_no: str | None = "", debug_borders: bool = False):
        self.font = font
        self.book_no = book_no or ""
        self.debug_borders = debug_borders

    def draw(self, canvas: Canvas, page_number: int) -> None:
        """在新页上绘制装饰（page_number 为合并后文档中的绝对页码）"""
        if page_number >= 2:
            self.draw_ordinal(canvas, page_number)
        if self.book_no:
            self.draw_book_number(canvas)
        if self.debug_borders:
            self.draw_debug_border(canvas)

    def draw_ordinal(self, canvas: Canvas, page_number: int) -> None:
        text = page_ordinal_text(page_number)
        y = PAGE_HEIGHT - MARGIN_TOP + PAGE_NUMBER_Y_OFFSET
        canvas.setFont(self.font, FONT_SIZE_CONTENT)
        canvas.drawCentredString(PAGE_WIDTH / 2, y, text)

    def draw_book_number(self, canvas: Canvas) -> None:
        canvas.setFont(self.font, FONT_SIZE_FIELD_VALUE)
        canvas.drawString(BOOK_NUMBER_X, BOOK_NUMBER_Y, self.book_no)

    def draw_debug_border(self, canvas: Canvas) -> None:
        canvas.saveState()
        canvas.setStrokeColor(colors.red)
        canvas.setLineWidth(0.5)
        canvas.rect(
            MARGIN_LEFT,
            MARGIN_BOTTOM,
            PAGE_WIDTH - MARGIN_LEFT - MARGIN_RIGHT,
            PAGE_HEIGHT - MARGIN_TOP - MARGIN_BOTTOM,
        )
        canvas.restoreState()


class PageFlowController:
    """分页控制器"""

    def __init__(
        self,
        canvas: Canvas,
        furniture: PageFurniture,
        page_number_offset: int = 0,
        min_y: float = MIN_Y_POSITION,
        top_y: float = CONTINUATION_TOP_Y,
        first_top_y: float = FIRST_PAGE_TOP_Y,
    ):
        self.canvas = canvas
        self.furniture = furniture
        self.page_number_offset = page_number_offset
        self.min_y = min_y
        self.top_y = top_y
        self.first_top_y = first_top_y

        self.state = PageState.NEW_PAGE
        self.page_number = page_number_offset
        self.current_y = first_top_y
        self._started = False

    # ------------------------------------------------------------------
    # 属性
    # ------------------------------------------------------------------

    @property
    def usable_height(self) -> float:
        """续页可用高度（任何原子单元都不能超过）"""
        return self.top_y - self.min_y

    @property
    def page_index(self) -> int:
        """当前页在本文档内的下标（从0开始）"""
        return self.page_number - self.page_number_offset - 1

    @property
    def page_count(self) -> int:
        return self.page_number - self.page_number_offset

    # ------------------------------------------------------------------
    # 状态迁移
    # ------------------------------------------------------------------

    def start(self, top_y: float | None = None) -> float:
        """开始首页（首页同样绘制文号戳）"""
        if self._started:
            raise LayoutError("分页控制器已启动")
        self._started = True
        self._begin_page(self.first_top_y if top_y is None else top_y)
        return self.current_y

    def new_page(self) -> float:
        """关闭当前页写入器并开新页"""
        self._ensure_open()
        if not self._started:
            return self.start(self.top_y)
        self.canvas.showPage()
        self.state = PageState.NEW_PAGE
        self._begin_page(self.top_y)
        return self.current_y

    def request_space(self, height: float) -> float:
        """
        为高度为 height 的原子单元申请空间

        Returns:
            可用的基线 y（必要时已换页）

        Raises:
            LayoutError: 单元高度超过整页可用高度
        """
        self._ensure_open()
        if not self._started:
            self.start()
        if height > self.usable_height:
            raise LayoutError(
                f"原子单元高度 {height:.1f}pt 超过整页可用高度 {self.usable_height:.1f}pt"
            )
        if self.current_y - height < self.min_y:
            logger.debug(f"第{self.page_number}页剩余空间不足 ({self.current_y:.1f} - {height:.1f} < {self.min_y})")
            self.new_page()
        return self.current_y

    def advance(self, height: float) -> float:
        """游标下移"""
        if height < 0:
            raise ValueError(f"游标只能下移: {height}")
        self.current_y -= height
        return self.current_y

    def advance_to(self, y: float) -> float:
        """游标下移到指定位置"""
        if y > self.current_y:
            raise ValueError(f"游标只能下移: {self.current_y:.1f} → {y:.1f}")
        self.current_y = y
        return self.current_y

    def close(self) -> None:
        """关闭最后一页写入器（终态）"""
        if self.state is PageState.CLOSED:
            return
        if self._started:
            self.canvas.showPage()
        self.state = PageState.CLOSED

    # ------------------------------------------------------------------
    # 内部
    # ------------------------------------------------------------------

    def _begin_page(self, top_y: float) -> None:
        self.page_number += 1
        self.furniture.draw(self.canvas, self.page_number)
        self.current_y = top_y
        self.state = PageState.ON_PAGE
        logger.debug(f"新建第{self.page_number}页")

    def _ensure_open(self) -> None:
        if self.state is PageState.CLOSED:
            raise LayoutError("文档已关闭，不能继续绘制")
