"""
公文类型模型 - 九类公文与签名框类型

BookNameId (GUID) 与类型代码的对照来自公文系统主数据。
"""

from __future__ import annotations

from enum import Enum


class BookType(str, Enum):
    """公文类型"""
    MEMO = "memo"                   # บันทึกข้อความ
    REGULATION = "regulation"       # หนังสือระเบียบ
    ANNOUNCEMENT = "announcement"   # หนังสือประกาศ
    ORDER = "order"                 # หนังสือคำสั่ง
    INBOUND = "inbound"             # หนังสือรับเข้า
    OUTBOUND = "outbound"           # หนังสือส่งออก
    STAMP = "stamp"                 # หนังสือประทับตรา
    MINISTRY = "ministry"           # หนังสือภายใต้กระทรวง
    RULE = "rule"                   # หนังสือข้อบังคับ
    UNKNOWN = "unknown"

    @property
    def code(self) -> str:
        return self.value

    @property
    def guid(self) -> str:
        return _BOOK_TYPE_GUIDS.get(self, "")

    @property
    def thai_name(self) -> str:
        return _BOOK_TYPE_THAI_NAMES[self]

    @property
    def requires_main_pdf(self) -> bool:
        """受文登记（INBOUND）不生成主文档"""
        return self is not BookType.INBOUND

    @property
    def requires_memo_attachment(self) -> bool:
        """发文（OUTBOUND）需附带备忘录存档副本"""
        return self is BookType.OUTBOUND

    @classmethod
    def from_id(cls, book_name_id: str | None) -> BookType:
        """按 BookNameId (GUID) 查找，大小写不敏感；未知返回 UNKNOWN"""
        if not book_name_id:
            return cls.UNKNOWN
        normalized = book_name_id.strip().upper()
        for book_type, guid in _BOOK_TYPE_GUIDS.items():
            if guid == normalized:
                return book_type
        return cls.UNKNOWN

    @classmethod
    def from_code(cls, code: str | None) -> BookType:
        """按类型代码查找（如 "memo"），未知返回 UNKNOWN"""
        if not code:
            return cls.UNKNOWN
        try:
            return cls(code.strip().lower())
        except ValueError:
            return cls.UNKNOWN


_BOOK_TYPE_GUIDS: dict[BookType, str] = {
    BookType.MEMO: "BB4A2F11-722D-449A-BCC5-22208C7A4DEC",
    BookType.REGULATION: "50792880-F85A-4343-9672-7B61AF828A5B",
    BookType.ANNOUNCEMENT: "23065068-BB18-49EA-8CE7-22945E16CB6D",
    BookType.ORDER: "3FEDE42B-078A-4D2C-9B21-3EAD3E418F3D",
    BookType.INBOUND: "03241AA7-0E85-4C5C-A2CC-688212A79B84",
    BookType.OUTBOUND: "90F72F0E-528D-4992-907A-F2C6B37AD9A5",
    BookType.STAMP: "AF3E7697-6F7E-4AD8-B76C-E2134DB98747",
    BookType.MINISTRY: "4B3EB169-6203-4A71-A3BD-A442FEAAA91F",
    BookType.RULE: "4AB1EC00-9E5E-4113-B577-D8ED46BA7728",
}

_BOOK_TYPE_THAI_NAMES: dict[BookType, str] = {
    BookType.MEMO: "บันทึกข้อความ",
    BookType.REGULATION: "หนังสือระเบียบ",
    BookType.ANNOUNCEMENT: "หนังสือประกาศ",
    BookType.ORDER: "หนังสือคำสั่ง",
    BookType.INBOUND: "หนังสือรับเข้า",
    BookType.OUTBOUND: "หนังสือส่งออก",
    BookType.STAMP: "หนังสือประทับตรา",
    BookType.MINISTRY: "หนังสือภายใต้กระทรวง",
    BookType.RULE: "หนังสือข้อบังคับ",
    BookType.UNKNOWN: "ไม่ทราบประเภท",
}


class SignBoxType:
    """签名框内文字"""
    SIGN = "ลงนาม"        # 签署人
    SUBMIT = "เสนอผ่าน"   # 呈报人
    LEARNER = "เรียน"     # 受文人


class RoleTag(str, Enum):
    """签名域角色标记（参与域名唯一性）"""
    SIGN = "Sign"
    SUBMIT = "Submit"
    LEARNER = "Learner"
