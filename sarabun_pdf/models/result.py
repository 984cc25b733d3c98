"""
生成结果模型

未实现的公文类型以 Unsupported 结果表示，调用方必须显式处理。
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, Field

from .book import BookType


class PdfResultType(str, Enum):
    """子文档类别（决定合并顺序：主文档 → 备忘录 → 其他）"""
    MAIN = "Main"
    MEMO = "Memo"
    OTHER = "Other"


class PdfResult(BaseModel):
    """单个子文档"""
    pdf_bytes: bytes
    type: PdfResultType
    description: str = ""
    recipient_id: str | None = None
    recipient_name: str | None = None


class Built(BaseModel):
    """生成器产出"""
    kind: Literal["built"] = "built"
    results: list[PdfResult] = Field(default_factory=list)


class Unsupported(BaseModel):
    """不支持的公文类型"""
    kind: Literal["unsupported"] = "unsupported"
    book_type: BookType
    reason: str = ""


BuildOutcome = Union[Built, Unsupported]


class Completed(BaseModel):
    """完整的合并结果"""
    kind: Literal["completed"] = "completed"
    pdf_bytes: bytes
    pdf_base64: str
    page_count: int
    descriptions: list[str] = Field(default_factory=list)
    field_names: list[str] = Field(default_factory=list)


class Failed(BaseModel):
    """生成失败（不返回任何部分产物）"""
    kind: Literal["failed"] = "failed"
    message: str


GenerationOutcome = Union[Completed, Failed, Unsupported]
