"""
版面模型 - 字段/表格/内容分段/签名槽/合并计划

生命周期：字段、单元格、签名槽只存在于一次生成调用内；
ComposedDocument 在所有子文档生成后创建，返回后不可变。
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from .book import RoleTag
from .signer import SignerInfo


class FontVariant(str, Enum):
    """字体变体"""
    REGULAR = "regular"
    BOLD = "bold"


class FieldSpec(BaseModel):
    """带点线的标签字段"""
    label: str
    value: str | None = None
    x: float = Field(..., description="标签起点x")
    rule_end_x: float | None = Field(default=None, description="点线终点x，缺省为右边距")


# ============================================================================
# 表格
# ============================================================================

class TableCell(BaseModel):
    """表格单元格"""
    text: str = ""
    colspan: int = 1
    rowspan: int = 1
    is_header: bool = False
    column_index: int = Field(default=0, description="起始列（已跳过上方跨行占用的列）")


class TableRow(BaseModel):
    """表格行（仅包含从本行开始的单元格）"""
    cells: list[TableCell] = Field(default_factory=list)


class TableModel(BaseModel):
    """表格网格模型，列宽之和恒等于总宽"""
    rows: list[TableRow] = Field(default_factory=list)
    column_widths: list[float] = Field(default_factory=list)
    total_width: float = 0.0

    @model_validator(mode="after")
    def _check_widths(self) -> TableModel:
        if self.column_widths and abs(sum(self.column_widths) - self.total_width) > 1e-6:
            raise ValueError(
                f"列宽之和 {sum(self.column_widths)} 不等于总宽 {self.total_width}"
            )
        return self

    @property
    def column_count(self) -> int:
        return len(self.column_widths)

    def cell_width(self, cell: TableCell) -> float:
        end = min(cell.column_index + cell.colspan, self.column_count)
        return sum(self.column_widths[cell.column_index:end])

    def cell_x(self, cell: TableCell) -> float:
        return sum(self.column_widths[: cell.column_index])


class ContentPartType(str, Enum):
    """正文分段类型"""
    TEXT = "text"
    TABLE = "table"


class ContentPart(BaseModel):
    """正文分段（文字或表格片段，按原文顺序）"""
    type: ContentPartType
    content: str

    @property
    def is_table(self) -> bool:
        return self.type is ContentPartType.TABLE

    @property
    def is_text(self) -> bool:
        return self.type is ContentPartType.TEXT


# ============================================================================
# 签名槽
# ============================================================================

class SignatureSlot(BaseModel):
    """签名槽：可见框 + 表单签名域"""
    field_name: str
    role: RoleTag
    page_index: int = Field(..., description="所在页（文档内从0开始）")
    x: float
    y: float
    width: float
    height: float
    signer: SignerInfo | None = None

    @property
    def rect(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.x + self.width, self.y + self.height)


# ============================================================================
# 合并计划
# ============================================================================

class PageBlockKind(str, Enum):
    """追加页块类型"""
    SUBMIT = "submit"
    LEARNER = "learner"


class PageBlock(BaseModel):
    """追加页块描述（每块从新页开始）"""
    kind: PageBlockKind
    signer: SignerInfo
    summary_names: list[str] = Field(default_factory=list, description="受文页块抬头的签署人姓名")

    model_config = {"frozen": True}


class ComposedDocument(BaseModel):
    """合并计划：有序源文档 + 追加页块"""
    sources: tuple[bytes, ...]
    blocks: tuple[PageBlock, ...] = ()
    book_no: str = ""

    model_config = {"frozen": True}
