"""
签名槽 - 可见虚线框 + 说明文字/姓名/职务 + 表单签名域

职责：
1. SignatureFieldPlacer: 按实测高度申请空间，绘制虚线框；说明文字超宽（或强制）时置于框上方，否则居中于框内；
   框下依次居中绘制 "(姓名)" 与职务（为空则省略）
2. 签名域命名: {角色}_D{文档序号}_{签署人序号}_{清洗后的邮箱或 user序号}
3. FormFieldRegistry: 本文档内的签名域登记；重名时追加 _2/_3…（或按配置报错）
4. apply_form_fields: canvas 保存后用 pypdf 写入 /Sig 控件与 /AcroForm
5. 签名域注册失败只记录警告，绝不影响可见框

依赖：
- reportlab: canvas 绘制
- pypdf: /Sig 控件与 /AcroForm 写入

测试要点：
- test_field_name_sanitized: 非字母数字字符替换为下划线
- test_caption_above_when_wide: 超宽说明文字置于框上方
- test_registration_failure_keeps_box: 注册失败时框仍被绘制
- test_widgets_written: 写出的PDF包含 /Sig 签名域
"""

from __future__ import annotations

import logging
import re
from io import BytesIO
from typing import TYPE_CHECKING

from pypdf import PdfReader, PdfWriter
from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    FloatObject,
    NameObject,
    NumberObject,
    TextStringObject,
)

from ..interfaces import FormFieldError
from ..models import RoleTag, SignatureSlot, SignerInfo
from .constants import (
    SIGNATURE_BOX_COLOR,
    SIGNATURE_BOX_DASH,
    SIGNATURE_BOX_HEIGHT,
    SIGNATURE_BOX_LINE_WIDTH,
    SIGNATURE_BOX_WIDTH,
    SIGNATURE_BOX_X,
    SIGNATURE_CAPTION_SIZE,
    SIGNATURE_NAME_SIZE,
    SIGNATURE_POSITION_SIZE,
)

if TYPE_CHECKING:
    from .fonts import DocumentFonts
    from .page_flow import PageFlowController
    from .text_flow import TextFlowEngine

logger = logging.getLogger(__name__)

CAPTION_ABOVE_GAP = 25.0
CAPTION_INSIDE_OFFSET = 20.0
CAPTION_MARGIN = 20.0
NAME_GAP = 15.0
NAME_LINE_HEIGHT = 20.0
POSITION_LINE_HEIGHT = 25.0

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def sanitize_identity(value: str) -> str:
    return _NON_ALNUM.sub("_", value)


def build_field_name(role: RoleTag, doc_index: int, signer_index: int, email: str | None = None) -> str:
    """签名域名：角色 + 文档序号 + 签署人序号 + 身份标识"""
    token = sanitize_identity(email) if email else f"user{signer_index}"
    return f"{role.value}_D{doc_index}_{signer_index}_{token}"


# ============================================================================
# 签名域登记
# ============================================================================

class FormFieldRegistry:
    """单份文档的签名域登记表"""

    def __init__(self, dedupe: bool = True):
        self.dedupe = dedupe
        self.slots: list[SignatureSlot] = []
        self._names: set[str] = set()

    @property
    def field_names(self) -> list[str]:
        return [slot.field_name for slot in self.slots]

    def unique_name(self, name: str) -> str:
        if name not in self._names:
            return name
        suffix = 2
        while f"{name}_{suffix}" in self._names:
            suffix += 1
        return f"{name}_{suffix}"

    def register(self, slot: SignatureSlot) -> SignatureSlot:
        """
        登记签名域

        Raises:
            FormFieldError: 页码/矩形非法，或不允许去重时重名
        """
        if slot.page_index < 0:
            raise FormFieldError(f"签名域 {slot.field_name} 页码非法: {slot.page_index}")
        if slot.width <= 0 or slot.height <= 0:
            raise FormFieldError(f"签名域 {slot.field_name} 尺寸非法: {slot.width}x{slot.height}")

        if slot.field_name in self._names:
            if not self.dedupe:
                raise FormFieldError(f"签名域重名: {slot.field_name}")
            renamed = self.unique_name(slot.field_name)
            logger.debug(f"签名域重名，改名为 {renamed}")
            slot = slot.model_copy(update={"field_name": renamed})

        self._names.add(slot.field_name)
        self.slots.append(slot)
        logger.debug(f"登记签名域 {slot.field_name} (页{slot.page_index}, {slot.rect})")
        return slot


# ============================================================================
# 绘制
# ============================================================================

class SignatureFieldPlacer:
    """签名槽绘制器"""

    def __init__(
        self,
        flow: PageFlowController,
        text_flow: TextFlowEngine,
        fonts: DocumentFonts,
        registry: FormFieldRegistry,
        box_x: float = SIGNATURE_BOX_X,
        box_width: float = SIGNATURE_BOX_WIDTH,
        box_height: float = SIGNATURE_BOX_HEIGHT,
    ):
        self.flow = flow
        self.text_flow = text_flow
        self.fonts = fonts
        self.registry = registry
        self.box_x = box_x
        self.box_width = box_width
        self.box_height = box_height

    @property
    def center_x(self) -> float:
        return self.box_x + self.box_width / 2

    def caption_above(self, caption: str | None, force: bool = False) -> bool:
        if not caption:
            return False
        if force:
            return True
        width = self.text_flow.width(caption, self.fonts.regular, SIGNATURE_CAPTION_SIZE)
        return width > self.box_width - CAPTION_MARGIN

    def measure(self, signer: SignerInfo | None, caption: str | None = None, force_caption_above: bool = False) -> float:
        """签名块实测高度（说明文字 + 框 + 姓名 + 职务）"""
        height = self.box_height + NAME_GAP
        if self.caption_above(caption, force_caption_above):
            height += CAPTION_ABOVE_GAP
        if signer is not None and signer.full_name:
            height += NAME_LINE_HEIGHT
        if signer is not None and signer.position_name:
            height += POSITION_LINE_HEIGHT
        return height

    def place(
        self,
        signer: SignerInfo | None,
        role: RoleTag,
        doc_index: int,
        signer_index: int,
        caption: str | None = None,
        force_caption_above: bool = False,
    ) -> float:
        """
        绘制签名槽并登记签名域

        Returns:
            签名块之后的新基线
        """
        canvas = self.flow.canvas
        height = self.measure(signer, caption, force_caption_above)
        y = self.flow.request_space(height)

        above = self.caption_above(caption, force_caption_above)
        if above:
            canvas.setFont(self.fonts.regular, SIGNATURE_CAPTION_SIZE)
            canvas.drawCentredString(self.center_x, y, caption)
            y -= CAPTION_ABOVE_GAP

        box_y = y - self.box_height
        self._draw_box(box_y)
        if caption and not above:
            canvas.setFont(self.fonts.regular, SIGNATURE_CAPTION_SIZE)
            canvas.drawCentredString(self.center_x, box_y + CAPTION_INSIDE_OFFSET, caption)

        field_name = build_field_name(role, doc_index, signer_index, signer.email if signer else None)
        try:
            self.registry.register(SignatureSlot(
                field_name=field_name,
                role=role,
                page_index=self.flow.page_index,
                x=self.box_x,
                y=box_y,
                width=self.box_width,
                height=self.box_height,
                signer=signer,
            ))
        except FormFieldError as e:
            logger.warning(f"签名域注册失败，保留可见签名框: {e}")

        y = box_y - NAME_GAP
        if signer is not None and signer.full_name:
            canvas.setFont(self.fonts.regular, SIGNATURE_NAME_SIZE)
            canvas.drawCentredString(self.center_x, y, f"({signer.full_name})")
            y -= NAME_LINE_HEIGHT
        if signer is not None and signer.position_name:
            canvas.setFont(self.fonts.regular, SIGNATURE_POSITION_SIZE)
            canvas.drawCentredString(self.center_x, y, signer.position_name)
            y -= POSITION_LINE_HEIGHT

        return self.flow.advance_to(y)

    def _draw_box(self, box_y: float) -> None:
        canvas = self.flow.canvas
        canvas.saveState()
        canvas.setStrokeColorRGB(*SIGNATURE_BOX_COLOR)
        canvas.setLineWidth(SIGNATURE_BOX_LINE_WIDTH)
        canvas.setDash(*SIGNATURE_BOX_DASH)
        canvas.rect(self.box_x, box_y, self.box_width, self.box_height, stroke=1, fill=0)
        canvas.restoreState()


# ============================================================================
# 表单写入（pypdf）
# ============================================================================

def _signature_widget(slot: SignatureSlot) -> DictionaryObject:
    return DictionaryObject({
        NameObject("/Type"): NameObject("/Annot"),
        NameObject("/Subtype"): NameObject("/Widget"),
        NameObject("/FT"): NameObject("/Sig"),
        NameObject("/T"): TextStringObject(slot.field_name),
        NameObject("/Rect"): ArrayObject([FloatObject(v) for v in slot.rect]),
        NameObject("/F"): NumberObject(4),
    })


def add_signature_widget(writer: PdfWriter, slot: SignatureSlot) -> None:
    """在 writer 的指定页加入 /Sig 控件（/P 与 /Annots 由 add_annotation 维护）"""
    if not 0 <= slot.page_index < len(writer.pages):
        raise FormFieldError(f"签名域 {slot.field_name} 指向不存在的页 {slot.page_index}")
    writer.add_annotation(slot.page_index, _signature_widget(slot))


def iter_signature_widgets(writer: PdfWriter):
    """按页序遍历所有 /Sig 控件的间接引用"""
    for page in writer.pages:
        annots = page.get("/Annots")
        if annots is None:
            continue
        for ref in annots.get_object():
            widget = ref.get_object()
            if widget.get("/FT") == "/Sig":
                yield ref


def install_acroform(writer: PdfWriter) -> list[str]:
    """
    按页面上的 /Sig 控件重建 /AcroForm /Fields

    名称冲突时追加 _2/_3…，保证整份文档签名域唯一。
    """
    seen: set[str] = set()
    fields = ArrayObject()
    for ref in iter_signature_widgets(writer):
        widget = ref.get_object()
        name = str(widget.get("/T", ""))
        if name in seen:
            suffix = 2
            while f"{name}_{suffix}" in seen:
                suffix += 1
            logger.warning(f"合并后签名域重名: {name} → {name}_{suffix}")
            name = f"{name}_{suffix}"
            widget[NameObject("/T")] = TextStringObject(name)
        seen.add(name)
        fields.append(ref)

    if fields:
        writer.root_object[NameObject("/AcroForm")] = DictionaryObject({
            NameObject("/Fields"): fields,
            NameObject("/SigFlags"): NumberObject(1),
        })
    elif "/AcroForm" in writer.root_object:
        del writer.root_object["/AcroForm"]
    return [str(ref.get_object()["/T"]) for ref in fields]


def apply_form_fields(pdf_bytes: bytes, slots: list[SignatureSlot]) -> bytes:
    """把已登记的签名域写入 canvas 生成的PDF"""
    if not slots:
        return pdf_bytes

    reader = PdfReader(BytesIO(pdf_bytes))
    writer = PdfWriter()
    for page in reader.pages:
        writer.add_page(page)

    for slot in slots:
        try:
            add_signature_widget(writer, slot)
        except FormFieldError as e:
            logger.warning(f"签名域写入失败，保留可见签名框: {e}")

    install_acroform(writer)
    output = BytesIO()
    writer.write(output)
    return output.getvalue()
