"""
文本折行引擎 - 按像素宽度将文本折成有序行

职责：
1. 先按硬换行拆段，空段输出空行（保留人工留白）
2. 段内按空格分词，贪心装行（渲染宽度 ≤ max_width）
3. 单词本身超宽（泰文等无空格文字、超长token）时仅对该词逐字符装行，之后恢复按词装行
4. 首行缩进与续行缩进分别扣减可用宽度；段首空格作为首行缩进保留

纯函数、确定性、不抛异常。max_width 小于单字符宽度时每行一个字符（不会死循环）。

依赖：
- reportlab: pdfmetrics.stringWidth 测宽

测试要点：
- test_two_words_per_line: "AAAA BBBB CCCC" → ["AAAA BBBB", "CCCC"]
- test_width_bound: 每行宽度 ≤ W（单字符超宽除外）
- test_idempotent: 对输出再次折行结果不变
- test_char_fallback: 超长单词逐字符拆分
"""

from __future__ import annotations

from typing import Callable

from reportlab.pdfbase.pdfmetrics import stringWidth

MeasureFunc = Callable[[str, str, float], float]


class TextFlowEngine:
    """贪心折行引擎"""

    def __init__(self, measure: MeasureFunc | None = None):
        self._measure = measure or stringWidth

    def width(self, text: str, font: str, size: float) -> float:
        return self._measure(text, font, size)

    def wrap(
        self,
        text: str | None,
        font: str,
        size: float,
        max_width: float,
        first_indent: float = 0.0,
        continuation_indent: float = 0.0,
    ) -> list[str]:
        """
        折行

        Args:
            text: 原文（可含换行）
            font: 已注册的字体名
            size: 字号
            max_width: 行宽上限
            first_indent: 段首行相对起点的缩进（扣减首行可用宽度）
            continuation_indent: 续行缩进（使续行对齐到字段值起点而非标签）

        Returns:
            有序行列表；空输入返回空列表
        """
        if not text:
            return []

        first_budget = max_width - first_indent
        next_budget = max_width - continuation_indent

        lines: list[str] = []
        for paragraph in text.split("\n"):
            lines.extend(
                self._wrap_paragraph(paragraph.rstrip("\r"), font, size, first_budget, next_budget)
            )
        return lines

    def _wrap_paragraph(
        self,
        paragraph: str,
        font: str,
        size: float,
        first_budget: float,
        next_budget: float,
    ) -> list[str]:
        body = paragraph.lstrip(" ")
        if not body.strip():
            return [""]

        words = [w for w in body.split(" ") if w]
        indent = paragraph[: len(paragraph) - len(body)]
        # 缩进连同首字符都放不下时放弃缩进
        if indent and self.width(indent + words[0][0], font, size) > first_budget:
            indent = ""

        lines: list[str] = []
        current = ""

        def prefix() -> str:
            return "" if lines else indent

        def budget() -> float:
            return next_budget if lines else first_budget

        def fits(candidate: str) -> bool:
            return self.width(prefix() + candidate, font, size) <= budget()

        for word in words:
            candidate = f"{current} {word}" if current else word
            if fits(candidate):
                current = candidate
                continue

            if current:
                lines.append(prefix() + current)
                current = ""
                if fits(word):
                    current = word
                    continue

            # 单词独占一行仍超宽：逐字符装行
            for ch in word:
                if current and not fits(current + ch):
                    lines.append(prefix() + current)
                    current = ch
                else:
                    current += ch

        if current:
            lines.append(prefix() + current)
        return lines


_default_engine = TextFlowEngine()


def wrap(
    text: str | None,
    font: str,
    size: float,
    max_width: float,
    first_indent: float = 0.0,
    continuation_indent: float = 0.0,
) -> list[str]:
    """使用默认测宽函数折行"""
    return _default_engine.wrap(text, font, size, max_width, first_indent, continuation_indent)
