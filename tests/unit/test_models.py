"""
数据模型单元测试

每个模块完成后必须运行：pytest tests/unit/test_models.py -v
"""

import pytest
from pydantic import ValidationError

from sarabun_pdf.models import (
    BookRecipient,
    BookType,
    DocumentAttachment,
    GeneratePdfRequest,
    SignBoxType,
    SignatureSlot,
    SignerInfo,
    TableModel,
)


class TestBookType:
    """公文类型测试"""

    def test_from_id_case_insensitive(self):
        """测试GUID大小写不敏感"""
        assert BookType.from_id("bb4a2f11-722d-449a-bcc5-22208c7a4dec") is BookType.MEMO
        assert BookType.from_id(" 90F72F0E-528D-4992-907A-F2C6B37AD9A5 ") is BookType.OUTBOUND

    def test_from_id_unknown(self):
        """测试未知GUID"""
        assert BookType.from_id("00000000-0000-0000-0000-000000000000") is BookType.UNKNOWN
        assert BookType.from_id(None) is BookType.UNKNOWN

    def test_from_code(self):
        """测试类型代码"""
        assert BookType.from_code("Memo") is BookType.MEMO
        assert BookType.from_code("bogus") is BookType.UNKNOWN

    def test_every_type_has_guid(self):
        """测试九类公文都有唯一GUID"""
        guids = [t.guid for t in BookType if t is not BookType.UNKNOWN]
        assert len(guids) == 9
        assert len(set(guids)) == 9

    def test_flags(self):
        """测试主文档/备忘录副本标记"""
        assert not BookType.INBOUND.requires_main_pdf
        assert BookType.MEMO.requires_main_pdf
        assert BookType.OUTBOUND.requires_memo_attachment
        assert not BookType.MEMO.requires_memo_attachment


class TestSignerInfo:
    """签署人测试"""

    def test_full_name(self):
        """测试称谓直接连名"""
        signer = SignerInfo(prefix_name="นาย", firstname="สมชาย", lastname="ใจดี")
        assert signer.full_name == "นายสมชาย ใจดี"

    def test_full_name_without_lastname(self):
        """测试缺少姓"""
        assert SignerInfo(firstname="Anan").full_name == "Anan"
        assert SignerInfo().full_name == ""


class TestRequest:
    """生成请求测试"""

    def test_camel_case_fields(self):
        """测试接受上游 camelCase 字段"""
        request = GeneratePdfRequest.model_validate({
            "bookNameId": BookType.MEMO.guid,
            "bookTitle": "Title",
            "bookSigned": [{"firstname": "A", "positionName": "Director"}],
            "bookSubmited": [{"firstname": "B"}],
            "bookLearner": [{"firstname": "C"}],
        })
        assert request.book_type is BookType.MEMO
        assert request.book_title == "Title"
        assert request.signers()[0].position_name == "Director"
        assert request.signers()[0].sign_box_type == SignBoxType.SIGN
        assert request.submitters()[0].sign_box_type == SignBoxType.SUBMIT
        assert request.learners()[0].sign_box_type == SignBoxType.LEARNER

    def test_guid_takes_precedence(self):
        """测试GUID优先于类型代码"""
        request = GeneratePdfRequest(book_name_id=BookType.OUTBOUND.guid, book_type_code="memo")
        assert request.book_type is BookType.OUTBOUND

    def test_gov_name_fallback(self):
        """测试机关名称缺省取部门"""
        assert GeneratePdfRequest(department="Dept").gov_name == "Dept"
        assert GeneratePdfRequest(division_name="Div", department="Dept").gov_name == "Div"

    def test_request_id_generated(self):
        """测试自动生成请求ID"""
        assert GeneratePdfRequest().request_id != GeneratePdfRequest().request_id

    def test_recipient_display_name(self):
        """测试受文单位名与ID的回退顺序"""
        recipient = BookRecipient(department_name="Dept", ministry_name="Ministry", ministry_id="m-1")
        assert recipient.display_name == "Dept"
        assert recipient.recipient_id == "m-1"
        assert BookRecipient().display_name == "ผู้รับ"

    def test_attachment_display_text(self):
        """测试附件文字"""
        assert DocumentAttachment(name="A", remark="r").display_text == "A (r)"
        assert DocumentAttachment(name="A").display_text == "A"


class TestLayoutModels:
    """版面模型测试"""

    def test_table_widths_must_sum(self):
        """测试列宽之和必须等于总宽"""
        with pytest.raises(ValidationError):
            TableModel(column_widths=[10, 10], total_width=30)
        assert TableModel(column_widths=[10, 20], total_width=30).column_count == 2

    def test_signature_slot_rect(self):
        """测试签名槽矩形"""
        slot = SignatureSlot(field_name="f", role="Sign", page_index=0, x=10, y=20, width=30, height=40)
        assert slot.rect == (10, 20, 40, 60)
