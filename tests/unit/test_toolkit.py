"""
版面工具集单元测试

每个模块完成后必须运行：pytest tests/unit/test_toolkit.py -v
"""

import pytest

from sarabun_pdf.doc_gen.pdf_engine import count_pdf_pages, list_signature_fields
from sarabun_pdf.interfaces import LayoutError
from sarabun_pdf.layout.constants import FIRST_PAGE_TOP_Y
from sarabun_pdf.layout.page_flow import PageState
from sarabun_pdf.layout.toolkit import LayoutToolkit
from sarabun_pdf.models import ContentPart, ContentPartType, RoleTag


@pytest.fixture
def kit(font_library) -> LayoutToolkit:
    return LayoutToolkit(font_library.open_document_fonts(), book_no="BK-9")


class TestLayoutToolkit:
    """版面工具集测试"""

    def test_finish_empty_document(self, kit):
        """测试空文档输出一页"""
        pdf = kit.finish()
        assert count_pdf_pages(pdf) == 1

    def test_finish_twice_raises(self, kit):
        """测试文档只能输出一次"""
        kit.finish()
        with pytest.raises(LayoutError):
            kit.finish()

    def test_context_closes_on_error(self, font_library):
        """测试异常退出时关闭写入器"""
        with pytest.raises(RuntimeError):
            with LayoutToolkit(font_library.open_document_fonts()) as kit:
                kit.start()
                raise RuntimeError("boom")
        assert kit.flow.state is PageState.CLOSED

    def test_draw_text_returns_next_baseline(self, kit):
        """测试单行文字返回 y - size - 5"""
        kit.start()
        assert kit.draw_text("hello", size=16) == pytest.approx(FIRST_PAGE_TOP_Y - 21)

    def test_draw_text_at_keeps_cursor(self, kit):
        """测试定位绘制不移动游标"""
        kit.start()
        assert kit.draw_text_at("x", 300, 500, size=16) == pytest.approx(479)
        assert kit.y == pytest.approx(FIRST_PAGE_TOP_Y)

    def test_draw_paragraphs_line_height(self, kit):
        """测试段落行高为字号 + 10"""
        kit.start()
        y = kit.draw_paragraphs("one\ntwo\nthree", size=16)
        assert y == pytest.approx(FIRST_PAGE_TOP_Y - 3 * 26)

    def test_blank_paragraph_keeps_line(self, kit, font_library):
        """测试空段落同样占一行"""
        kit.start()
        y = kit.draw_paragraphs("a\n\nb", size=16)
        assert y == pytest.approx(FIRST_PAGE_TOP_Y - 3 * 26)

        other = LayoutToolkit(font_library.open_document_fonts())
        other.start()
        assert other.draw_paragraphs("a\nb", size=16) > y
        other.close()

    def test_long_content_paginates(self, kit):
        """测试长正文自动分页"""
        kit.draw_paragraphs("\n".join(f"line {i}" for i in range(80)))
        pdf = kit.finish()
        assert count_pdf_pages(pdf) > 1

    def test_draw_separator(self, kit):
        """测试分隔线返回 线y - 30"""
        kit.start()
        assert kit.draw_separator() == pytest.approx(FIRST_PAGE_TOP_Y - 15 - 30)

    def test_mixed_content(self, kit):
        """测试文字段与表格段混排"""
        parts = [
            ContentPart(type=ContentPartType.TEXT, content="intro"),
            ContentPart(type=ContentPartType.TABLE, content="<table><tr><td>a</td><td>b</td></tr></table>"),
            ContentPart(type=ContentPartType.TEXT, content="outro"),
        ]
        start = kit.start()
        assert kit.draw_mixed_content(parts) < start
        assert count_pdf_pages(kit.finish()) == 1

    def test_signature_fields_written(self, kit, make_signer):
        """测试签名域写入输出"""
        kit.start()
        kit.draw_signature(make_signer(email="x@y.th"), RoleTag.SIGN, 2, 0, caption="Sign")
        assert kit.field_names == ["Sign_D2_0_x_y_th"]
        assert list_signature_fields(kit.finish()) == ["Sign_D2_0_x_y_th"]

    def test_speed_layer_does_not_move_cursor(self, kit):
        """测试急件标记不占用游标"""
        kit.draw_speed_layer("URGENT")
        assert kit.y == pytest.approx(FIRST_PAGE_TOP_Y)
        assert kit.flow.page_count == 1
