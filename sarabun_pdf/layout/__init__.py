"""
版面引擎 - 折行、分页、字段、表格、签名槽

模块：
- constants.py  页面几何与字号常量
- thai.py       泰文数字与日期
- fonts.py      字体库与每文档字体句柄
- text_flow.py  TextFlowEngine
- page_flow.py  PageFlowController
- fields.py     FieldLayoutRenderer
- tables.py     TableLayoutEngine
- signature.py  SignatureFieldPlacer / FormFieldRegistry
- toolkit.py    LayoutToolkit
"""

from .fields import FieldLayoutRenderer
from .fonts import DocumentFonts, FileFontSource, FontLibrary
from .page_flow import PageFlowController, PageFurniture, PageState
from .signature import (
    FormFieldRegistry,
    SignatureFieldPlacer,
    apply_form_fields,
    build_field_name,
    install_acroform,
)
from .tables import TableLayoutEngine, parse_table, split_html_content
from .text_flow import TextFlowEngine, wrap
from .toolkit import LayoutToolkit

__all__ = [
    "TextFlowEngine",
    "wrap",
    "PageFlowController",
    "PageFurniture",
    "PageState",
    "FieldLayoutRenderer",
    "TableLayoutEngine",
    "parse_table",
    "split_html_content",
    "SignatureFieldPlacer",
    "FormFieldRegistry",
    "apply_form_fields",
    "build_field_name",
    "install_acroform",
    "FontLibrary",
    "FileFontSource",
    "DocumentFonts",
    "LayoutToolkit",
]
