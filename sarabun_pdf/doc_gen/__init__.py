"""
文档生成模块

模块：
- html_text.py   HTML → 版面纯文本
- content.py     正文/引文/附件/联系信息组装
- memo.py        MemoBuilder（บันทึกข้อความ）
- outbound.py    OutboundBuilder（หนังสือส่งออก）
- factory.py     BuilderFactory
- composer.py    DocumentComposer
- pdf_engine.py  base64/页数/签名域工具
"""

from .composer import DocumentComposer
from .factory import BuilderFactory, InboundBuilder, UnsupportedBuilder
from .html_text import html_to_plain_text, is_html, strip_html_tags
from .memo import MemoBuilder
from .outbound import OutboundBuilder
from .pdf_engine import (
    count_pdf_pages,
    decode_pdf_base64,
    encode_pdf_base64,
    list_signature_fields,
)

__all__ = [
    "DocumentComposer",
    "BuilderFactory",
    "InboundBuilder",
    "UnsupportedBuilder",
    "MemoBuilder",
    "OutboundBuilder",
    "html_to_plain_text",
    "is_html",
    "strip_html_tags",
    "count_pdf_pages",
    "decode_pdf_base64",
    "encode_pdf_base64",
    "list_signature_fields",
]
