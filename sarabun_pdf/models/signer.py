"""
签署人与联系信息模型
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class SignerInfo(BaseModel):
    """签署人/呈报人/受文人身份"""
    prefix_name: str | None = None
    firstname: str | None = None
    lastname: str | None = None
    position_name: str | None = None
    department_name: str | None = None
    email: str | None = None
    signature_base64: str | None = Field(default=None, description="签名图片（保留字段，不参与绘制）")
    sign_box_type: str | None = Field(default=None, description="框内文字：ลงนาม/เสนอผ่าน/เรียน")

    @property
    def full_name(self) -> str:
        """称谓直接连名，名与姓之间一个空格"""
        name = f"{self.prefix_name or ''}{self.firstname or ''}"
        if self.lastname is not None:
            name = f"{name} {self.lastname}"
        return name.strip()


class ContactInfo(BaseModel):
    """联系信息（结构化字段或原始多行文本二选一）"""
    department: str | None = None
    phone: str | None = None
    fax: str | None = None
    email: str | None = None
    raw_contact: str | None = None

    @property
    def has_any_info(self) -> bool:
        return any([self.department, self.phone, self.fax, self.email, self.raw_contact])

    @property
    def use_raw_contact(self) -> bool:
        return bool(self.raw_contact)
