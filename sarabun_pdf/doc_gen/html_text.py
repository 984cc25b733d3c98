"""
HTML → 版面纯文本

富文本编辑器产出的正文在绘制前转换为带段落/缩进标记的纯文本：
- <br> → 换行
- <p>/<div> → 新起一行，段首4空格缩进，段尾换行
- <li> → "• " 前缀
- <h1>…<h6> → 独占一行
- 删除 script/style，NBSP → 空格，删除换行前的空白，3个以上换行压缩为2个

测试要点：
- test_paragraph_indent: 段落缩进与换行
- test_list_bullets: 列表前缀
- test_is_html: 标签识别
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

INDENT = "    "
BULLET = "• "

_TAG_PATTERN = re.compile(r"<[a-zA-Z][^>]*>")
_WHITESPACE = re.compile(r"\s+")
_SPACE_BEFORE_NEWLINE = re.compile(r"[ \t]+\n")
_EXTRA_NEWLINES = re.compile(r"\n{3,}")
_HEADINGS = {"h1", "h2", "h3", "h4", "h5", "h6"}


def is_html(text: str | None) -> bool:
    """是否包含HTML标签"""
    if not text or not text.strip():
        return False
    return _TAG_PATTERN.search(text) is not None


def _ends_line(out: list[str]) -> bool:
    return not out or out[-1].endswith("\n") or out[-1] == INDENT


def _newline_if_needed(out: list[str]) -> None:
    if out and not out[-1].endswith("\n"):
        out.append("\n")


def _extract(node: Tag, out: list[str]) -> None:
    for child in node.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            text = _WHITESPACE.sub(" ", str(child))
            if not text.strip():
                continue
            if _ends_line(out):
                text = text.lstrip()
            out.append(text)
            continue
        if not isinstance(child, Tag):
            continue

        name = child.name.lower()
        if name == "br":
            out.append("\n")
        elif name in ("p", "div"):
            _newline_if_needed(out)
            out.append(INDENT)
            _extract(child, out)
            out.append("\n")
        elif name == "li":
            _newline_if_needed(out)
            out.append(BULLET)
            _extract(child, out)
            out.append("\n")
        elif name in _HEADINGS:
            _newline_if_needed(out)
            _extract(child, out)
            out.append("\n")
        else:
            _extract(child, out)


def html_to_plain_text(html: str | None) -> str:
    """HTML转版面纯文本（保留段落与缩进标记）"""
    if not html or not html.strip():
        return ""

    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()

    out: list[str] = []
    _extract(soup.body if soup.body is not None else soup, out)

    text = "".join(out).replace("\u00a0", " ")
    text = _SPACE_BEFORE_NEWLINE.sub("\n", text)
    text = _EXTRA_NEWLINES.sub("\n\n", text)
    return text.strip()


def strip_html_tags(html: str | None) -> str:
    """只保留文字，空白压缩为单个空格"""
    if not html or not html.strip():
        return ""
    text = BeautifulSoup(html, "html.parser").get_text(" ")
    return _WHITESPACE.sub(" ", text.replace("\u00a0", " ")).strip()


def to_plain_text(text: str | None) -> str:
    """HTML转纯文本，普通文本原样返回"""
    if not text:
        return ""
    return html_to_plain_text(text) if is_html(text) else text
