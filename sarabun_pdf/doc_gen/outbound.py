"""
发文生成器 - หนังสือส่งออก

每个外部受文单位单独成文（文档序号依次递增）；没有受文单位时生成一份。
发文总是附带一份备忘录存档副本（สำเนาเก็บ）。

版面（自上而下）：
1. ที่ + 文号（左） / 机关地址与日期（右）
2. เรื่อง、称谓行、เรียน、อ้างถึง
3. สิ่งที่ส่งมาด้วย（多于一项时泰文编号逐行列出）
4. 正文（文字与表格按原文顺序）
5. 受文人签名槽（角色 Learner；第一个框的说明文字为结束语，固定置于框上方）
6. 联系信息

测试要点：
- test_one_document_per_recipient: 每个受文单位一份 + 备忘录副本
- test_fallback_single_document: 无受文单位时一份
- test_learner_fields_unique_per_document: 各份文档签名域不重名
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..interfaces import GenerationError, IDocumentBuilder, SarabunPdfError
from ..layout.constants import (
    FONT_SIZE_FIELD,
    FONT_SIZE_FIELD_VALUE,
    LOGO_HEIGHT,
    MARGIN_LEFT,
    MARGIN_RIGHT,
    PAGE_WIDTH,
    SPACING_BEFORE_CONTENT,
    SPACING_BEFORE_SIGNATURES,
    SPACING_BETWEEN_FIELDS,
    SPACING_BETWEEN_SIGNATURES,
    TEXT_LINE_GAP,
)
from ..layout.thai import to_thai_digits
from ..layout.toolkit import LayoutToolkit
from ..models import (
    BookRecipient,
    BookType,
    Built,
    ContactInfo,
    GeneratePdfRequest,
    PdfResult,
    PdfResultType,
    RoleTag,
    SignBoxType,
)
from .content import build_attachments, build_contact_info, build_refer_to, content_parts
from .memo import MemoBuilder

if TYPE_CHECKING:
    from ..config import LayoutConfig
    from ..layout.fonts import FontLibrary
    from ..layout.text_flow import TextFlowEngine

logger = logging.getLogger(__name__)

ADDRESS_WIDTH = 180.0
ADDRESS_X = PAGE_WIDTH - MARGIN_RIGHT - ADDRESS_WIDTH
HEADER_GAP = 15.0
HEADER_BOTTOM_GAP = 30.0
CONTACT_GAP = 20.0
ATTACHMENT_LABEL = "สิ่งที่ส่งมาด้วย"


class OutboundBuilder(IDocumentBuilder):
    """发文生成器"""

    book_type = BookType.OUTBOUND

    def __init__(
        self,
        fonts: FontLibrary,
        layout: LayoutConfig | None = None,
        text_flow: TextFlowEngine | None = None,
        memo_builder: MemoBuilder | None = None,
    ):
        self.fonts = fonts
        self.layout = layout
        self.text_flow = text_flow
        self.memo_builder = memo_builder or MemoBuilder(fonts, layout, text_flow)

    def build(self, request: GeneratePdfRequest, doc_index: int = 1) -> Built:
        results: list[PdfResult] = []

        if request.book_recipients:
            for i, recipient in enumerate(request.book_recipients):
                pdf_bytes = self.render(request, recipient, doc_index + i)
                name = recipient.display_name
                results.append(PdfResult(
                    pdf_bytes=pdf_bytes,
                    type=PdfResultType.MAIN,
                    description=f"หนังสือส่งออก ถึง {name}",
                    recipient_id=recipient.recipient_id,
                    recipient_name=name,
                ))
                logger.info(f"[{request.request_id}] 发文 {i + 1}/{len(request.book_recipients)}: {name}")
        else:
            pdf_bytes = self.render(request, None, doc_index)
            results.append(PdfResult(pdf_bytes=pdf_bytes, type=PdfResultType.MAIN, description="หนังสือส่งออก"))

        if self.book_type.requires_memo_attachment:
            memo_bytes = self.memo_builder.render(request, doc_index + len(results))
            results.append(PdfResult(
                pdf_bytes=memo_bytes,
                type=PdfResultType.MEMO,
                description="บันทึกข้อความ (สำเนาเก็บ)",
            ))

        return Built(results=results)

    def render(self, request: GeneratePdfRequest, recipient: BookRecipient | None, doc_index: int) -> bytes:
        """生成一份发文PDF"""
        try:
            return self._render(request, recipient, doc_index)
        except SarabunPdfError:
            raise
        except Exception as e:
            raise GenerationError(f"ไม่สามารถสร้าง PDF หนังสือส่งออกได้: {e}") from e

    def _render(self, request: GeneratePdfRequest, recipient: BookRecipient | None, doc_index: int) -> bytes:
        if recipient is not None:
            recipients = recipient.display_name
            salutation = recipient.salutation or request.salutation
            salutation_ending = recipient.salutation_content or request.salutation_ending
            end_doc = recipient.end_doc or request.end_doc
        else:
            recipients = request.recipients or ""
            salutation = request.salutation
            salutation_ending = request.salutation_ending
            end_doc = request.end_doc

        parts = content_parts(request.book_content)
        learners = request.learners()
        logger.info(
            f"[{request.request_id}] 生成发文: 受文={recipients!r}, 结束语={end_doc!r}, 文档序号={doc_index}"
        )

        fonts = self.fonts.open_document_fonts()
        with LayoutToolkit(
            fonts,
            book_no=request.book_no,
            layout=self.layout,
            text_flow=self.text_flow,
            title=BookType.OUTBOUND.thai_name,
        ) as kit:
            kit.start()
            kit.skip(LOGO_HEIGHT + HEADER_GAP)
            self._draw_header(kit, request)

            kit.draw_text(f"เรื่อง  {request.book_title or ''}", size=FONT_SIZE_FIELD_VALUE)
            kit.skip(SPACING_BETWEEN_FIELDS)

            if salutation:
                line = salutation
                if salutation_ending:
                    line += f"  {salutation_ending}"
                kit.draw_text(line, size=FONT_SIZE_FIELD_VALUE)
                kit.skip(SPACING_BETWEEN_FIELDS)

            kit.draw_text(f"เรียน  {recipients}", size=FONT_SIZE_FIELD_VALUE)
            kit.skip(SPACING_BETWEEN_FIELDS)

            kit.draw_hanging_text("อ้างถึง  ", build_refer_to(request), size=FONT_SIZE_FIELD_VALUE)
            kit.skip(SPACING_BETWEEN_FIELDS)

            self._draw_attachments(kit, build_attachments(request))
            kit.skip(SPACING_BETWEEN_FIELDS)

            if parts:
                kit.skip(SPACING_BEFORE_CONTENT)
                kit.draw_mixed_content(parts)

            if learners:
                kit.skip(SPACING_BEFORE_SIGNATURES)
                for i, learner in enumerate(learners):
                    end_doc_caption = i == 0 and bool(end_doc)
                    kit.draw_signature(
                        learner, RoleTag.LEARNER, doc_index, i,
                        caption=end_doc if end_doc_caption else SignBoxType.LEARNER,
                        force_caption_above=end_doc_caption,
                    )
                    kit.skip(SPACING_BETWEEN_SIGNATURES)

            self._draw_contact(kit, build_contact_info(request))
            return kit.finish()

    def _draw_header(self, kit: LayoutToolkit, request: GeneratePdfRequest) -> None:
        """ที่ + 文号（左）与地址、日期（右）共用首行"""
        field_y = kit.y
        kit.draw_text_at("ที่", MARGIN_LEFT, field_y, size=FONT_SIZE_FIELD, bold=True)
        if request.book_no:
            label_width = kit.text_flow.width("ที่ ", kit.fonts.bold, FONT_SIZE_FIELD)
            kit.draw_text_at(request.book_no, MARGIN_LEFT + label_width, field_y, size=FONT_SIZE_FIELD_VALUE)

        address_y = field_y
        if request.address:
            for line in request.address.replace("\\n", "\n").split("\n"):
                address_y = kit.draw_text_at(line.strip(), ADDRESS_X, address_y, size=FONT_SIZE_FIELD_VALUE)

        if request.date_thai:
            address_y -= TEXT_LINE_GAP
            kit.draw_text_at(request.date_thai, ADDRESS_X, address_y, size=FONT_SIZE_FIELD_VALUE)

        kit.flow.advance_to(min(field_y - HEADER_BOTTOM_GAP, address_y - HEADER_BOTTOM_GAP))

    def _draw_attachments(self, kit: LayoutToolkit, attachments: list[str]) -> None:
        if len(attachments) == 1:
            kit.draw_hanging_text(f"{ATTACHMENT_LABEL}  ", attachments[0], size=FONT_SIZE_FIELD_VALUE)
            return
        if not attachments:
            kit.draw_text(f"{ATTACHMENT_LABEL}  ", size=FONT_SIZE_FIELD_VALUE)
            return

        kit.draw_text(ATTACHMENT_LABEL, size=FONT_SIZE_FIELD_VALUE)
        indent_x = MARGIN_LEFT + kit.text_flow.width(f"{ATTACHMENT_LABEL}  ", kit.fonts.regular, FONT_SIZE_FIELD_VALUE)
        for i, item in enumerate(attachments, start=1):
            kit.draw_paragraphs(f"{to_thai_digits(i)}. {item}", x=indent_x, size=FONT_SIZE_FIELD_VALUE)

    def _draw_contact(self, kit: LayoutToolkit, contact: ContactInfo) -> None:
        if not contact.has_any_info:
            return
        kit.skip(CONTACT_GAP)

        if contact.department:
            kit.draw_text(contact.department, size=FONT_SIZE_FIELD_VALUE)

        if contact.use_raw_contact:
            for line in contact.raw_contact.replace("\\n", "\n").split("\n"):
                line = line.strip()
                if line:
                    kit.draw_text(line, size=FONT_SIZE_FIELD_VALUE)
            return

        for prefix, value in (("โทร. ", contact.phone), ("โทรสาร ", contact.fax), ("อีเมล ", contact.email)):
            if value:
                kit.draw_text(f"{prefix}{value}", size=FONT_SIZE_FIELD_VALUE)
