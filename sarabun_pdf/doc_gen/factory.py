"""
生成器工厂 - 公文类型 → 生成器

- MEMO / OUTBOUND: 已实现
- INBOUND: 受文登记不生成主文档（空结果，其他附件照常合并）
- 其余类型: 显式返回 Unsupported，调用方必须处理
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..interfaces import IDocumentBuilder
from ..models import BookType, Built, BuildOutcome, GeneratePdfRequest, Unsupported
from .memo import MemoBuilder
from .outbound import OutboundBuilder

if TYPE_CHECKING:
    from ..config import LayoutConfig
    from ..layout.fonts import FontLibrary
    from ..layout.text_flow import TextFlowEngine

logger = logging.getLogger(__name__)


class InboundBuilder(IDocumentBuilder):
    """受文登记：没有主文档"""

    book_type = BookType.INBOUND

    def build(self, request: GeneratePdfRequest, doc_index: int = 1) -> Built:
        logger.info(f"[{request.request_id}] 受文登记不生成主文档")
        return Built(results=[])


class UnsupportedBuilder(IDocumentBuilder):
    """尚未实现的公文类型"""

    def __init__(self, book_type: BookType):
        self.book_type = book_type

    def build(self, request: GeneratePdfRequest, doc_index: int = 1) -> Unsupported:
        return Unsupported(
            book_type=self.book_type,
            reason=f"ยังไม่รองรับการสร้าง {self.book_type.thai_name}",
        )


class BuilderFactory:
    """生成器工厂"""

    def __init__(
        self,
        fonts: FontLibrary,
        layout: LayoutConfig | None = None,
        text_flow: TextFlowEngine | None = None,
    ):
        memo = MemoBuilder(fonts, layout, text_flow)
        self._builders: dict[BookType, IDocumentBuilder] = {
            BookType.MEMO: memo,
            BookType.OUTBOUND: OutboundBuilder(fonts, layout, text_flow, memo_builder=memo),
            BookType.INBOUND: InboundBuilder(),
        }

    @property
    def supported_types(self) -> list[BookType]:
        return list(self._builders)

    def get(self, book_type: BookType) -> IDocumentBuilder:
        return self._builders.get(book_type) or UnsupportedBuilder(book_type)

    def build(self, request: GeneratePdfRequest, doc_index: int = 1) -> BuildOutcome:
        book_type = request.book_type
        builder = self.get(book_type)
        logger.info(f"[{request.request_id}] 公文类型 {book_type.code} → {type(builder).__name__}")
        return builder.build(request, doc_index)
