"""
泰文数字与日期

- to_thai_digits: 阿拉伯数字 → ๐-๙
- thai_date: 日 月名 佛历年（泰文数字）
"""

from __future__ import annotations

from datetime import date, datetime

THAI_DIGITS = "๐๑๒๓๔๕๖๗๘๙"
THAI_MONTHS = (
    "มกราคม", "กุมภาพันธ์", "มีนาคม", "เมษายน", "พฤษภาคม", "มิถุนายน",
    "กรกฎาคม", "สิงหาคม", "กันยายน", "ตุลาคม", "พฤศจิกายน", "ธันวาคม",
)
BUDDHIST_ERA_OFFSET = 543

_DIGIT_TABLE = str.maketrans("0123456789", THAI_DIGITS)


def to_thai_digits(value: int | str) -> str:
    """数字转泰文数字，非数字字符保持不变"""
    return str(value).translate(_DIGIT_TABLE)


def page_ordinal_text(page_number: int) -> str:
    """页码戳文字，例如 "- ๒ -" """
    return f"- {to_thai_digits(page_number)} -"


def thai_date(day: int, month: int, year_be: int) -> str:
    """泰文日期（年份为佛历）"""
    if not 1 <= month <= 12:
        raise ValueError(f"月份超出范围: {month}")
    return f"{to_thai_digits(day)} {THAI_MONTHS[month - 1]} {to_thai_digits(year_be)}"


def thai_date_from_ad(day: int, month: int, year_ad: int) -> str:
    """公历年份自动转佛历"""
    return thai_date(day, month, year_ad + BUDDHIST_ERA_OFFSET)


def thai_date_of(value: date | datetime | None) -> str:
    if value is None:
        return ""
    return thai_date_from_ad(value.day, value.month, value.year)
