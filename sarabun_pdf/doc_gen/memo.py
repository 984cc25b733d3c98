"""
备忘录生成器 - บันทึกข้อความ

版面（自上而下）：
1. 急件标记（右上角红字）
2. 标题 "บันทึกข้อความ"（居中加粗）
3. ส่วนราชการ（通栏字段）
4. ที่ / วันที่（同行双字段，ที่ 的点线止于 วันที่ 之前）
5. เรื่อง（通栏字段）
6. เรียน（续行对齐到 "เรียน  " 之后）
7. 正文（文字与表格按原文顺序）
8. 签署人签名槽（角色 Sign）

测试要点：
- test_build_returns_main: 产出一份主文档
- test_signature_fields: 每个签署人一个签名域
- test_recipients_fallback: 未给出受文人时使用受文人职务
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..interfaces import GenerationError, IDocumentBuilder, SarabunPdfError
from ..layout.constants import (
    DATE_X_POSITION,
    FONT_SIZE_FIELD_VALUE,
    FONT_SIZE_HEADER,
    LOGO_SPACING,
    MARGIN_LEFT,
    SPACING_AFTER_HEADER,
    SPACING_BEFORE_CONTENT,
    SPACING_BEFORE_SIGNATURES,
    SPACING_BETWEEN_FIELDS,
    SPACING_BETWEEN_SIGNATURES,
)
from ..layout.toolkit import LayoutToolkit
from ..models import (
    BookType,
    Built,
    FieldSpec,
    GeneratePdfRequest,
    PdfResult,
    PdfResultType,
    RoleTag,
    SignBoxType,
)
from .content import content_parts

if TYPE_CHECKING:
    from ..config import LayoutConfig
    from ..layout.fonts import FontLibrary
    from ..layout.text_flow import TextFlowEngine

logger = logging.getLogger(__name__)

MEMO_HEADER = "บันทึกข้อความ"
DATE_RULE_GAP = 20.0


class MemoBuilder(IDocumentBuilder):
    """备忘录生成器"""

    book_type = BookType.MEMO

    def __init__(
        self,
        fonts: FontLibrary,
        layout: LayoutConfig | None = None,
        text_flow: TextFlowEngine | None = None,
    ):
        self.fonts = fonts
        self.layout = layout
        self.text_flow = text_flow

    def build(self, request: GeneratePdfRequest, doc_index: int = 1) -> Built:
        pdf_bytes = self.render(request, doc_index)
        return Built(results=[
            PdfResult(pdf_bytes=pdf_bytes, type=PdfResultType.MAIN, description=MEMO_HEADER),
        ])

    @staticmethod
    def resolve_recipients(request: GeneratePdfRequest) -> str:
        """受文人：请求中的受文人文本，否则各受文人的职务（逐行）"""
        if request.recipients:
            return request.recipients
        return "\n".join(
            learner.position_name for learner in request.book_learner if learner.position_name
        )

    def render(self, request: GeneratePdfRequest, doc_index: int = 1) -> bytes:
        """生成备忘录PDF"""
        try:
            return self._render(request, doc_index)
        except SarabunPdfError:
            raise
        except Exception as e:
            raise GenerationError(f"ไม่สามารถสร้าง PDF บันทึกข้อความได้: {e}") from e

    def _render(self, request: GeneratePdfRequest, doc_index: int) -> bytes:
        gov_name = request.gov_name
        title = request.book_title or ""
        recipients = self.resolve_recipients(request)
        parts = content_parts(request.book_content)
        signers = request.signers()
        logger.info(
            f"[{request.request_id}] 生成备忘录: 标题={title!r}, 正文段={len(parts)}, "
            f"签署人={len(signers)}, 文档序号={doc_index}"
        )

        fonts = self.fonts.open_document_fonts()
        with LayoutToolkit(
            fonts,
            book_no=request.book_no,
            layout=self.layout,
            text_flow=self.text_flow,
            title=MEMO_HEADER,
        ) as kit:
            kit.start()
            kit.draw_speed_layer(request.speed_layer)
            kit.skip(LOGO_SPACING)

            kit.draw_centered_text(MEMO_HEADER, size=FONT_SIZE_HEADER, bold=True)
            kit.skip(SPACING_AFTER_HEADER)

            if gov_name:
                kit.fields.draw_field("ส่วนราชการ", gov_name)
                kit.skip(SPACING_BETWEEN_FIELDS)

            book_no_field = FieldSpec(
                label="ที่",
                value=request.book_no or "",
                x=MARGIN_LEFT,
                rule_end_x=DATE_X_POSITION - DATE_RULE_GAP,
            )
            date_field = None
            if request.date_thai:
                date_field = FieldSpec(label="วันที่", value=request.date_thai, x=DATE_X_POSITION)
            kit.fields.draw_dual_field(book_no_field, date_field)
            kit.skip(SPACING_BETWEEN_FIELDS)

            if title:
                kit.fields.draw_field("เรื่อง", title)
                kit.skip(SPACING_BETWEEN_FIELDS)

            if recipients:
                kit.draw_hanging_text("เรียน  ", recipients, size=FONT_SIZE_FIELD_VALUE)
                kit.skip(SPACING_BETWEEN_FIELDS)

            if parts:
                kit.skip(SPACING_BEFORE_CONTENT)
                kit.draw_mixed_content(parts)

            if signers:
                kit.skip(SPACING_BEFORE_SIGNATURES)
                for i, signer in enumerate(signers):
                    kit.draw_signature(
                        signer, RoleTag.SIGN, doc_index, i,
                        caption=signer.sign_box_type or SignBoxType.SIGN,
                    )
                    kit.skip(SPACING_BETWEEN_SIGNATURES)

            pdf_bytes = kit.finish()

        logger.info(f"[{request.request_id}] 备忘录完成: {len(pdf_bytes)}B")
        return pdf_bytes
