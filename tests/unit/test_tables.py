"""
表格引擎单元测试

每个模块完成后必须运行：pytest tests/unit/test_tables.py -v
"""

import pytest

from sarabun_pdf.layout.constants import CONTINUATION_TOP_Y
from sarabun_pdf.layout.tables import (
    TableLayoutEngine,
    contains_table,
    parse_table,
    split_html_content,
)
from sarabun_pdf.models import ContentPartType


@pytest.fixture
def engine(flow, text_flow) -> TableLayoutEngine:
    return TableLayoutEngine(flow, text_flow, "Helvetica", "Helvetica-Bold")


def _table(*rows: str) -> str:
    return "<table>" + "".join(f"<tr>{r}</tr>" for r in rows) + "</table>"


class TestParseTable:
    """表格解析测试"""

    def test_parse_spans(self):
        """测试 colspan/rowspan 解析与默认值"""
        html = _table(
            '<th colspan="2">Head</th><th>X</th>',
            '<td rowspan="2">A</td><td>B</td><td colspan="abc">C</td>',
            "<td>D</td><td>E</td>",
        )
        model = parse_table(html, 300)
        assert model.column_count == 3

        head = model.rows[0].cells[0]
        assert head.is_header
        assert head.colspan == 2

        a, b, c = model.rows[1].cells
        assert a.rowspan == 2
        assert c.colspan == 1
        assert (a.column_index, b.column_index, c.column_index) == (0, 1, 2)

        d, e = model.rows[2].cells
        assert (d.column_index, e.column_index) == (1, 2)

    def test_invalid_spans_default_to_one(self):
        """测试非法或非正的跨度按1处理"""
        model = parse_table(_table('<td colspan="0" rowspan="-3">A</td>'), 100)
        cell = model.rows[0].cells[0]
        assert (cell.colspan, cell.rowspan) == (1, 1)

    @pytest.mark.parametrize("columns", [1, 3, 7])
    def test_column_widths_sum(self, columns):
        """测试列宽之和等于总宽"""
        model = parse_table(_table("<td>x</td>" * columns), 455.27)
        assert model.column_count == columns
        assert sum(model.column_widths) == pytest.approx(455.27)

    def test_cell_geometry(self):
        """测试单元格x与宽度"""
        model = parse_table(_table('<td>a</td><td colspan="2">b</td>'), 300)
        cell = model.rows[0].cells[1]
        assert model.cell_x(cell) == pytest.approx(100)
        assert model.cell_width(cell) == pytest.approx(200)

    def test_no_table(self):
        """测试没有表格时返回 None"""
        assert parse_table("<p>plain</p>", 100) is None

    def test_nested_table_rows_skipped(self):
        """测试嵌套表格的行不计入外层"""
        html = "<table><tr><td>outer<table><tr><td>inner</td></tr></table></td></tr></table>"
        model = parse_table(html, 100)
        assert len(model.rows) == 1


class TestTableLayoutEngine:
    """表格绘制测试"""

    def test_row_heights_respect_minimum(self, engine):
        """测试行高不低于最小行高"""
        model = parse_table(_table("<td></td>", "<td>text</td>"), 300)
        for height in engine.row_heights(model):
            assert height >= engine.min_row_height

    def test_row_height_grows_with_lines(self, engine):
        """测试行高随折行数增加"""
        model = parse_table(_table("<td>one</td>", "<td>" + "word " * 40 + "</td>"), 100)
        short, tall = engine.row_heights(model)
        lines = engine.cell_lines(model, model.rows[1].cells[0])
        assert tall == pytest.approx(len(lines) * engine.line_height + 2 * engine.padding)
        assert tall > short

    def test_row_break_before_second_row(self, engine, flow):
        """测试第2行放不下时恰好在其前换页一次"""
        model = parse_table(
            _table("<td>one</td>", "<td>" + "word " * 40 + "</td>", "<td>three</td>"),
            100,
        )
        heights = engine.row_heights(model)
        flow.start()
        flow.advance_to(flow.min_y + heights[0] + 10)

        result = engine.render(model)
        assert [p.page_number for p in result.placements] == [1, 2, 2]
        assert result.page_breaks == 1
        assert result.placements[1].top == pytest.approx(CONTINUATION_TOP_Y)
        assert result.placements[2].top == pytest.approx(CONTINUATION_TOP_Y - heights[1])

    def test_header_not_repeated(self, engine, flow, canvas):
        """测试跨页续排不重复表头"""
        rows = ["<th>Header</th>"] + [f"<td>row {i}</td>" for i in range(60)]
        model = parse_table(_table(*rows), 200)
        engine.render(model)
        assert flow.page_count > 1
        headers = [args for args in canvas.calls("text") if args[2] == "Header"]
        assert len(headers) == 1

    def test_render_html_without_table(self, engine, flow):
        """测试没有表格时不绘制"""
        flow.start()
        result = engine.render_html("<p>none</p>", 300)
        assert result.placements == []
        assert result.y == flow.current_y


class TestSplitHtmlContent:
    """混排正文拆分测试"""

    def test_split_preserves_order(self):
        """测试文字/表格分段顺序与原文一致"""
        html = "<p>before</p>" + _table("<td>cell</td>") + "<p>after</p><p>more</p>"
        parts = split_html_content(html)
        assert [p.type for p in parts] == [
            ContentPartType.TEXT,
            ContentPartType.TABLE,
            ContentPartType.TEXT,
        ]
        assert parts[0].content == "before"
        assert "cell" in parts[1].content
        assert parts[2].content == "after\nmore"

    def test_container_with_table_expanded(self):
        """测试包含表格的容器被展开"""
        html = "<div><p>intro</p>" + _table("<td>x</td>") + "</div>"
        parts = split_html_content(html)
        assert [p.type for p in parts] == [ContentPartType.TEXT, ContentPartType.TABLE]

    def test_empty(self):
        """测试空输入"""
        assert split_html_content("") == []
        assert split_html_content(None) == []

    def test_contains_table(self):
        """测试表格识别"""
        assert contains_table("<TABLE><tr><td>a</td></tr></TABLE>")
        assert not contains_table("<p>a</p>")
        assert not contains_table(None)
