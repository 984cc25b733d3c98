"""
数据模型层 - 定义所有数据结构

模块：
- book.py      公文类型/签名框文字/角色标记
- signer.py    签署人/联系信息
- request.py   生成请求
- layout.py    字段/表格/分段/签名槽/合并计划
- result.py    子文档与生成结果
"""

from .book import BookType, RoleTag, SignBoxType
from .layout import (
    ComposedDocument,
    ContentPart,
    ContentPartType,
    FieldSpec,
    FontVariant,
    PageBlock,
    PageBlockKind,
    SignatureSlot,
    TableCell,
    TableModel,
    TableRow,
)
from .request import (
    BookContentItem,
    BookRecipient,
    BookReferTo,
    BookRelate,
    DocumentAttachment,
    GeneratePdfRequest,
)
from .result import (
    BuildOutcome,
    Built,
    Completed,
    Failed,
    GenerationOutcome,
    PdfResult,
    PdfResultType,
    Unsupported,
)
from .signer import ContactInfo, SignerInfo

__all__ = [
    # book
    "BookType",
    "SignBoxType",
    "RoleTag",
    # signer
    "SignerInfo",
    "ContactInfo",
    # request
    "GeneratePdfRequest",
    "BookContentItem",
    "BookRecipient",
    "BookReferTo",
    "BookRelate",
    "DocumentAttachment",
    # layout
    "FontVariant",
    "FieldSpec",
    "TableCell",
    "TableRow",
    "TableModel",
    "ContentPart",
    "ContentPartType",
    "SignatureSlot",
    "PageBlock",
    "PageBlockKind",
    "ComposedDocument",
    # result
    "PdfResult",
    "PdfResultType",
    "Built",
    "Unsupported",
    "BuildOutcome",
    "Completed",
    "Failed",
    "GenerationOutcome",
]
