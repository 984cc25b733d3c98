"""
生成请求模型 - 上游已完成校验与清洗的结构化公文数据

字段名同时接受 snake_case 与上游 JSON 的 camelCase。
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from .book import BookType, SignBoxType
from .signer import ContactInfo, SignerInfo

_CAMEL = {"alias_generator": to_camel, "populate_by_name": True}


class BookContentItem(BaseModel):
    """正文段落（标题 + HTML/纯文本正文）"""
    book_content_title: str | None = None
    book_content: str | None = None
    next_page_status: bool = False

    model_config = _CAMEL


class DocumentAttachment(BaseModel):
    """随文附件"""
    name: str | None = None
    remark: str | None = None

    model_config = _CAMEL

    @property
    def display_text(self) -> str:
        text = self.name or ""
        if self.remark is not None:
            text += f" ({self.remark})"
        return text


class BookReferTo(BaseModel):
    """引文（อ้างถึง）"""
    book_refer_to_no: str | None = None
    book_refer_to_name: str | None = None
    create_date: datetime | None = None

    model_config = _CAMEL


class BookRelate(BaseModel):
    """公文关系人（签署/呈报/受文）"""
    prefix_name: str | None = None
    firstname: str | None = None
    lastname: str | None = None
    position_name: str | None = None
    department_name: str | None = None
    organize_name: str | None = None
    email: str | None = None
    signature_base64: str | None = None

    model_config = _CAMEL

    def to_signer(self, sign_box_type: str | None = None) -> SignerInfo:
        return SignerInfo(
            prefix_name=self.prefix_name,
            firstname=self.firstname,
            lastname=self.lastname,
            position_name=self.position_name,
            department_name=self.department_name,
            email=self.email,
            signature_base64=self.signature_base64,
            sign_box_type=sign_box_type,
        )


class BookRecipient(BaseModel):
    """发文的外部受文单位（每个单位单独成文）"""
    guid: str | None = None
    organize_name: str | None = None
    division_name: str | None = None
    department_name: str | None = None
    ministry_name: str | None = None
    division_id: str | None = None
    department_id: str | None = None
    ministry_id: str | None = None
    address: str | None = None
    salutation: str | None = None
    salutation_content: str | None = None
    end_doc: str | None = None

    model_config = _CAMEL

    @property
    def display_name(self) -> str:
        """单位名：组织 > 部门 > 司局 > 部委"""
        for name in (self.organize_name, self.division_name, self.department_name, self.ministry_name):
            if name:
                return name
        return "ผู้รับ"

    @property
    def recipient_id(self) -> str | None:
        for value in (self.guid, self.division_id, self.department_id, self.ministry_id):
            if value:
                return value
        return None


class GeneratePdfRequest(BaseModel):
    """公文生成请求"""
    request_id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])

    # 类型
    book_name_id: str | None = Field(default=None, description="公文类型GUID")
    book_type_code: str | None = Field(default=None, description="公文类型代码（GUID缺省时使用）")

    # 抬头字段
    book_title: str | None = None
    book_no: str | None = None
    date_thai: str | None = None
    address: str | None = None
    department: str | None = None
    division_name: str | None = None
    recipients: str | None = None
    speed_layer: str | None = None
    salutation: str | None = None
    salutation_ending: str | None = None
    end_doc: str | None = None

    # 联系信息
    contact: str | None = None
    contact_info: ContactInfo | None = None

    # 明细
    book_content: list[BookContentItem] = Field(default_factory=list)
    attachment: list[DocumentAttachment] = Field(default_factory=list)
    book_refer_to: list[BookReferTo] = Field(default_factory=list)
    book_recipients: list[BookRecipient] = Field(default_factory=list)

    # 关系人
    book_signed: list[BookRelate] = Field(default_factory=list)
    book_submited: list[BookRelate] = Field(default_factory=list)
    book_learner: list[BookRelate] = Field(default_factory=list)

    # 其他附件PDF（base64），按顺序合并在主文档/备忘录之后
    other_pdfs: list[str] = Field(default_factory=list)

    model_config = _CAMEL

    @property
    def book_type(self) -> BookType:
        book_type = BookType.from_id(self.book_name_id)
        if book_type is BookType.UNKNOWN:
            book_type = BookType.from_code(self.book_type_code)
        return book_type

    @property
    def gov_name(self) -> str:
        return self.division_name or self.department or ""

    def signers(self) -> list[SignerInfo]:
        return [r.to_signer(SignBoxType.SIGN) for r in self.book_signed]

    def submitters(self) -> list[SignerInfo]:
        return [r.to_signer(SignBoxType.SUBMIT) for r in self.book_submited]

    def learners(self) -> list[SignerInfo]:
        return [r.to_signer(SignBoxType.LEARNER) for r in self.book_learner]
