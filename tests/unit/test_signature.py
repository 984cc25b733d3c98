"""
签名槽单元测试

每个模块完成后必须运行：pytest tests/unit/test_signature.py -v
"""

from io import BytesIO

import pytest
from pypdf import PdfReader
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen.canvas import Canvas

from sarabun_pdf.doc_gen.pdf_engine import list_signature_fields, signature_fields_by_page
from sarabun_pdf.interfaces import FormFieldError
from sarabun_pdf.layout.constants import FIRST_PAGE_TOP_Y, SIGNATURE_BOX_HEIGHT
from sarabun_pdf.layout.signature import (
    FormFieldRegistry,
    SignatureFieldPlacer,
    apply_form_fields,
    build_field_name,
    sanitize_identity,
)
from sarabun_pdf.models import RoleTag, SignatureSlot


@pytest.fixture
def registry() -> FormFieldRegistry:
    return FormFieldRegistry()


@pytest.fixture
def placer(flow, text_flow, builtin_fonts, registry) -> SignatureFieldPlacer:
    return SignatureFieldPlacer(flow, text_flow, builtin_fonts, registry)


def _slot(name: str, page_index: int = 0, **kwargs) -> SignatureSlot:
    values = {"x": 100, "y": 100, "width": 180, "height": 50}
    values.update(kwargs)
    return SignatureSlot(field_name=name, role=RoleTag.SIGN, page_index=page_index, **values)


def _blank_pdf(pages: int = 1) -> bytes:
    buffer = BytesIO()
    c = Canvas(buffer, pagesize=A4)
    for _ in range(pages):
        c.drawString(100, 700, "page")
        c.showPage()
    c.save()
    return buffer.getvalue()


class TestFieldName:
    """签名域命名测试"""

    def test_field_name_sanitized(self):
        """测试非字母数字字符替换为下划线"""
        assert sanitize_identity("a.b-c@x.go.th") == "a_b_c_x_go_th"
        assert build_field_name(RoleTag.SIGN, 1, 0, "a.b@x.th") == "Sign_D1_0_a_b_x_th"

    def test_field_name_without_email(self):
        """测试缺少邮箱时使用序号"""
        assert build_field_name(RoleTag.LEARNER, 3, 2, None) == "Learner_D3_2_user2"
        assert build_field_name(RoleTag.SUBMIT, 5, 1, "") == "Submit_D5_1_user1"


class TestFormFieldRegistry:
    """签名域登记测试"""

    def test_dedupe_renames(self, registry):
        """测试重名时追加序号"""
        registry.register(_slot("Sign_D1_0_a"))
        registry.register(_slot("Sign_D1_0_a"))
        registry.register(_slot("Sign_D1_0_a"))
        assert registry.field_names == ["Sign_D1_0_a", "Sign_D1_0_a_2", "Sign_D1_0_a_3"]

    def test_duplicate_raises_without_dedupe(self):
        """测试不去重时重名报错"""
        registry = FormFieldRegistry(dedupe=False)
        registry.register(_slot("Sign_D1_0_a"))
        with pytest.raises(FormFieldError):
            registry.register(_slot("Sign_D1_0_a"))

    def test_invalid_slot_raises(self, registry):
        """测试页码/尺寸非法"""
        with pytest.raises(FormFieldError):
            registry.register(_slot("a", page_index=-1))
        with pytest.raises(FormFieldError):
            registry.register(_slot("b", width=0))
        assert registry.slots == []


class TestSignatureFieldPlacer:
    """签名槽绘制测试"""

    def test_place_registers_slot(self, placer, registry, canvas, make_signer):
        """测试绘制虚线框并登记签名域"""
        signer = make_signer(email="a@example.go.th")
        y = placer.place(signer, RoleTag.SIGN, 1, 0, caption="Sign")

        assert registry.field_names == ["Sign_D1_0_a_example_go_th"]
        slot = registry.slots[0]
        assert slot.page_index == 0
        assert slot.signer == signer

        boxes = canvas.calls("rect")
        assert len(boxes) == 1
        assert boxes[0][:4] == (slot.x, slot.y, slot.width, slot.height)
        assert y == pytest.approx(FIRST_PAGE_TOP_Y - placer.measure(signer, "Sign"))

    def test_caption_inside_box(self, placer, canvas, make_signer):
        """测试短说明文字居中于框内"""
        placer.place(make_signer(), RoleTag.SIGN, 1, 0, caption="Sign")
        caption = [args for args in canvas.calls("centred") if args[2] == "Sign"][0]
        box_y = canvas.calls("rect")[0][1]
        assert caption[1] == pytest.approx(box_y + 20)

    def test_caption_above_when_wide(self, placer, canvas, make_signer):
        """测试超宽说明文字置于框上方"""
        caption = "A very long closing phrase that cannot fit inside the box"
        assert placer.caption_above(caption)
        placer.place(make_signer(), RoleTag.SIGN, 1, 0, caption=caption)

        drawn = [args for args in canvas.calls("centred") if args[2] == caption][0]
        box_x, box_y, _, box_h = canvas.calls("rect")[0][:4]
        assert drawn[1] == pytest.approx(FIRST_PAGE_TOP_Y)
        assert box_y + box_h == pytest.approx(FIRST_PAGE_TOP_Y - 25)

    def test_forced_caption_above(self, placer):
        """测试强制置于框上方"""
        assert not placer.caption_above("Sign")
        assert placer.caption_above("Sign", force=True)
        assert placer.measure(None, "Sign", True) == placer.measure(None, "Sign") + 25

    def test_name_and_position_lines(self, placer, canvas, make_signer):
        """测试框下姓名与职务"""
        signer = make_signer("Anan", "Test", prefix_name="Mr.", position_name="Director")
        placer.place(signer, RoleTag.SIGN, 1, 0)
        texts = [args[2] for args in canvas.calls("centred")]
        assert "(Mr.Anan Test)" in texts
        assert "Director" in texts

    def test_position_omitted_when_empty(self, placer, canvas, make_signer):
        """测试职务为空时省略"""
        signer = make_signer(position_name=None)
        base = SIGNATURE_BOX_HEIGHT + 15 + 20
        assert placer.measure(signer) == base
        placer.place(signer, RoleTag.SIGN, 1, 0)
        assert len(canvas.calls("centred")) == 1

    def test_registration_failure_keeps_box(self, flow, text_flow, builtin_fonts, canvas, make_signer):
        """测试注册失败时框仍被绘制"""
        registry = FormFieldRegistry(dedupe=False)
        placer = SignatureFieldPlacer(flow, text_flow, builtin_fonts, registry)
        signer = make_signer(email="same@example.go.th")

        placer.place(signer, RoleTag.SIGN, 1, 0)
        placer.place(signer, RoleTag.SIGN, 1, 0)

        assert len(canvas.calls("rect")) == 2
        assert registry.field_names == ["Sign_D1_0_same_example_go_th"]

    def test_signature_block_moves_to_next_page(self, placer, flow, registry, make_signer):
        """测试签名块整体换页"""
        flow.start()
        flow.advance_to(flow.min_y + 20)
        placer.place(make_signer(), RoleTag.SIGN, 1, 0)
        assert flow.page_number == 2
        assert registry.slots[0].page_index == 1


class TestApplyFormFields:
    """签名域写入测试"""

    def test_widgets_written(self):
        """测试写出的PDF包含 /Sig 签名域"""
        pdf = apply_form_fields(_blank_pdf(2), [_slot("Sign_D1_0_a"), _slot("Sign_D1_1_b", page_index=1)])
        assert list_signature_fields(pdf) == ["Sign_D1_0_a", "Sign_D1_1_b"]
        assert signature_fields_by_page(pdf) == [["Sign_D1_0_a"], ["Sign_D1_1_b"]]

    def test_widget_references_page(self):
        """测试控件 /P 指向所在页且 /AcroForm 收录控件"""
        pdf = apply_form_fields(_blank_pdf(2), [_slot("Sign_D1_1_b", page_index=1)])
        reader = PdfReader(BytesIO(pdf))
        page = reader.pages[1]
        widget = page["/Annots"][0].get_object()
        assert widget.raw_get("/P").idnum == page.indirect_reference.idnum
        assert widget["/Subtype"] == "/Widget"
        fields = reader.trailer["/Root"]["/AcroForm"]["/Fields"]
        assert [f.get_object()["/T"] for f in fields] == ["Sign_D1_1_b"]
        assert "/Annots" not in reader.pages[0]

    def test_missing_page_skipped(self, caplog):
        """测试指向不存在页的签名域被跳过并记录警告"""
        pdf = apply_form_fields(_blank_pdf(1), [_slot("ok"), _slot("lost", page_index=3)])
        assert list_signature_fields(pdf) == ["ok"]
        assert "lost" in caplog.text

    def test_no_slots_returns_input(self):
        """测试没有签名域时原样返回"""
        data = _blank_pdf()
        assert apply_form_fields(data, []) is data
