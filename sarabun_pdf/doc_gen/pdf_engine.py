"""
PDF工具 - base64 编解码、页数、签名域列表

依赖：
- pypdf: 读取页树与 /AcroForm

测试要点：
- test_decode_data_uri: 支持 data:application/pdf;base64, 前缀
- test_decode_invalid: 非法 base64 → RequestError
- test_count_pdf_pages: 页数计算
"""

from __future__ import annotations

import base64
import binascii
from io import BytesIO

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from ..interfaces import MergeError, RequestError

DATA_URI_PREFIX = "data:application/pdf;base64,"


def decode_pdf_base64(data: str) -> bytes:
    """base64 → PDF字节（可带 data URI 前缀）"""
    if not data or not data.strip():
        raise RequestError("PDF base64 为空")
    text = data.strip()
    if text.lower().startswith(DATA_URI_PREFIX):
        text = text[len(DATA_URI_PREFIX):]
    try:
        return base64.b64decode("".join(text.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise RequestError(f"PDF base64 无法解码: {e}") from e


def encode_pdf_base64(pdf_bytes: bytes) -> str:
    return base64.b64encode(pdf_bytes).decode("ascii")


def _reader(pdf_bytes: bytes) -> PdfReader:
    try:
        return PdfReader(BytesIO(pdf_bytes))
    except PdfReadError as e:
        raise MergeError(f"PDF无法解析: {e}") from e


def count_pdf_pages(pdf_bytes: bytes) -> int:
    """计算PDF页数"""
    return len(_reader(pdf_bytes).pages)


def list_signature_fields(pdf_bytes: bytes) -> list[str]:
    """按 /AcroForm /Fields 顺序列出签名域名"""
    reader = _reader(pdf_bytes)
    acroform = reader.trailer["/Root"].get("/AcroForm")
    if acroform is None:
        return []
    names = []
    for ref in acroform.get_object().get("/Fields", []):
        field = ref.get_object()
        if field.get("/FT") == "/Sig":
            names.append(str(field.get("/T", "")))
    return names


def signature_fields_by_page(pdf_bytes: bytes) -> list[list[str]]:
    """每页上的签名控件名（按页序）"""
    reader = _reader(pdf_bytes)
    pages = []
    for page in reader.pages:
        names = []
        annots = page.get("/Annots")
        for ref in annots.get_object() if annots is not None else []:
            widget = ref.get_object()
            if widget.get("/FT") == "/Sig":
                names.append(str(widget.get("/T", "")))
        pages.append(names)
    return pages
