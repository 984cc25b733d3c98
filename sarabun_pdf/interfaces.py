"""
模块接口契约 - 定义各模块的抽象接口

设计原则：
1. 模块间通过接口通信，不直接依赖具体实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换

使用方式：
    from sarabun_pdf.interfaces import IDocumentBuilder

    class MyBuilder(IDocumentBuilder):
        def build(self, request: GeneratePdfRequest, doc_index: int) -> BuildOutcome:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import BuildOutcome, FontVariant, GeneratePdfRequest, SignerInfo


# ============================================================================
# 资源模块接口
# ============================================================================

class IFontSource(ABC):
    """字体字节来源接口"""

    @abstractmethod
    def load_bytes(self, variant: FontVariant) -> bytes:
        """
        读取字体文件原始字节

        Args:
            variant: 字体变体（regular/bold）

        Returns:
            不可变的TTF字节

        Raises:
            ResourceError: 字体缺失或不可读
        """
        ...


# ============================================================================
# 文档生成模块接口
# ============================================================================

class IDocumentBuilder(ABC):
    """单类公文生成器接口"""

    @abstractmethod
    def build(self, request: GeneratePdfRequest, doc_index: int) -> BuildOutcome:
        """
        生成一类公文的PDF

        Args:
            request: 已校验的生成请求
            doc_index: 首个子文档序号（用于签名域命名，保证全局唯一）

        Returns:
            Built(结果列表) 或 Unsupported(原因)

        Raises:
            GenerationError: 生成失败
            ResourceError: 字体不可用
        """
        ...


class IDocumentComposer(ABC):
    """文档合并器接口"""

    @abstractmethod
    def compose(
        self,
        sources: list[bytes],
        submitters: list[SignerInfo],
        learners: list[SignerInfo],
        signers: list[SignerInfo] | None = None,
        book_no: str = "",
    ) -> bytes:
        """
        按业务顺序合并子文档并追加签署页块

        Args:
            sources: 已排序的子文档（主文档/备忘录/其他）
            submitters: 呈报人（每人一个新页块）
            learners: 受文人（每人一个新页块）
            signers: 签署人（受文页块抬头的姓名摘要）
            book_no: 文号（每页左下角）

        Returns:
            合并后的PDF字节

        Raises:
            MergeError: 无源文档或源文档无法解析
        """
        ...


# ============================================================================
# 异常定义
# ============================================================================

class SarabunPdfError(Exception):
    """基础异常"""
    pass


class LayoutError(SarabunPdfError):
    """版面错误：原子单元在任何页面都放不下"""
    pass


class ResourceError(SarabunPdfError):
    """资源错误：字体缺失或不可读"""
    pass


class MergeError(SarabunPdfError):
    """合并错误：无源文档或源文档无法解析"""
    pass


class FormFieldError(SarabunPdfError):
    """表单域错误：签名控件注册失败（可恢复）"""
    pass


class GenerationError(SarabunPdfError):
    """生成错误"""
    pass


class RequestError(SarabunPdfError):
    """请求错误：请求内容无法转成文档"""
    pass
