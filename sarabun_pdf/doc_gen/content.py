"""
正文与附属信息组装

- content_parts: 正文条目 → 有序文字段/表格段（含表格的条目按原文顺序拆分）
- build_refer_to: 引文 "名称 ที่ 文号 ลงวันที่ 泰文日期"，逐条换行
- build_attachments: "名称 (备注)"
- build_contact_info: 结构化联系信息优先，否则使用原始联系文本
"""

from __future__ import annotations

from ..layout.tables import contains_table, split_html_content
from ..layout.thai import thai_date_of
from ..models import (
    BookContentItem,
    ContactInfo,
    ContentPart,
    ContentPartType,
    GeneratePdfRequest,
)
from .html_text import is_html, html_to_plain_text, to_plain_text


def _item_text(item: BookContentItem) -> str:
    text = ""
    if item.book_content_title:
        text += to_plain_text(item.book_content_title) + "  "
    if item.book_content:
        text += to_plain_text(item.book_content)
    return text


def build_content(items: list[BookContentItem]) -> str:
    """正文纯文本：每条 "标题  正文"，条目之间空一行"""
    return "".join(_item_text(item) + "\n\n" for item in items).strip()


def content_parts(items: list[BookContentItem]) -> list[ContentPart]:
    """正文分段；相邻文字段合并，条目之间空一行"""
    parts: list[ContentPart] = []

    def add_text(text: str) -> None:
        text = text.strip()
        if not text:
            return
        if parts and parts[-1].is_text:
            merged = f"{parts[-1].content}\n\n{text}"
            parts[-1] = ContentPart(type=ContentPartType.TEXT, content=merged)
        else:
            parts.append(ContentPart(type=ContentPartType.TEXT, content=text))

    for item in items:
        if not contains_table(item.book_content):
            add_text(_item_text(item))
            continue

        if item.book_content_title:
            add_text(to_plain_text(item.book_content_title))
        for part in split_html_content(item.book_content):
            if part.is_table:
                parts.append(part)
            else:
                add_text(part.content)

    return parts


def build_refer_to(request: GeneratePdfRequest) -> str:
    lines = []
    for ref in request.book_refer_to:
        text = ref.book_refer_to_name or ""
        if ref.book_refer_to_no:
            text += f" ที่ {ref.book_refer_to_no}"
        if ref.create_date is not None:
            text += f" ลงวันที่ {thai_date_of(ref.create_date)}"
        if text:
            lines.append(text)
    return "\n".join(lines)


def build_attachments(request: GeneratePdfRequest) -> list[str]:
    return [attachment.display_text for attachment in request.attachment]


def build_contact_info(request: GeneratePdfRequest) -> ContactInfo:
    """联系信息：结构化字段优先（部门缺省取请求部门），否则原始文本"""
    info = request.contact_info
    if info is not None and info.has_any_info:
        return ContactInfo(
            department=info.department or request.department,
            phone=info.phone,
            fax=info.fax,
            email=info.email,
        )

    raw = request.contact
    if raw and is_html(raw):
        raw = html_to_plain_text(raw)
    return ContactInfo(department=request.department, raw_contact=raw or None)
