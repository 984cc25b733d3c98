"""
生成执行器 - 一次生成请求的完整编排

流程：
1. 解析公文类型，经工厂生成子文档（Unsupported 直接返回）
2. 解码请求附带的其他PDF
3. 排序：主文档 → 备忘录 → 其他
4. 合并并追加呈报/受文页块
5. 返回 Completed（完整PDF）或 Failed（可读的错误信息，绝不返回部分产物）

每次调用构造各自的版面状态，只共享不可变的字体库。

测试要点：
- test_run_memo_completed: 备忘录生成完整结果
- test_run_unsupported: 未实现类型返回 Unsupported
- test_run_bad_other_pdf: 附件base64非法 → Failed
- test_source_order: 主文档/备忘录/其他排序
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..config import get_config
from ..doc_gen import BuilderFactory, DocumentComposer
from ..doc_gen.pdf_engine import (
    count_pdf_pages,
    decode_pdf_base64,
    encode_pdf_base64,
    list_signature_fields,
)
from ..interfaces import SarabunPdfError
from ..layout.fonts import FontLibrary
from ..models import (
    Completed,
    Failed,
    GeneratePdfRequest,
    GenerationOutcome,
    PdfResult,
    PdfResultType,
    Unsupported,
)

if TYPE_CHECKING:
    from ..config import RuntimeConfig

logger = logging.getLogger(__name__)

SOURCE_ORDER = {
    PdfResultType.MAIN: 0,
    PdfResultType.MEMO: 1,
    PdfResultType.OTHER: 2,
}


def order_sources(results: list[PdfResult]) -> list[PdfResult]:
    """主文档 → 备忘录 → 其他（同类保持原顺序）"""
    return sorted(results, key=lambda r: SOURCE_ORDER[r.type])


class GenerationExecutor:
    """生成执行器"""

    def __init__(self, fonts: FontLibrary | None = None, config: RuntimeConfig | None = None):
        self.config = config or get_config()
        self.fonts = fonts or FontLibrary.from_config(self.config)
        self.factory = BuilderFactory(self.fonts, self.config.layout)
        self.composer = DocumentComposer(self.fonts, self.config.merge, self.config.layout)

    def run(self, request: GeneratePdfRequest) -> GenerationOutcome:
        """执行一次生成"""
        book_type = request.book_type
        logger.info(f"[{request.request_id}] 开始生成: {book_type.code} ({book_type.thai_name})")

        try:
            outcome = self.factory.build(request)
            if isinstance(outcome, Unsupported):
                logger.warning(f"[{request.request_id}] 不支持的公文类型: {outcome.reason}")
                return outcome

            sources = order_sources(outcome.results + self._other_sources(request))
            logger.info(
                f"[{request.request_id}] 子文档: " + ", ".join(f"{s.type.value}:{s.description}" for s in sources)
            )

            pdf_bytes = self.composer.compose(
                [s.pdf_bytes for s in sources],
                request.submitters(),
                request.learners(),
                signers=request.signers(),
                book_no=request.book_no or "",
            )
            page_count = count_pdf_pages(pdf_bytes)
            field_names = list_signature_fields(pdf_bytes)

        except SarabunPdfError as e:
            logger.exception(f"[{request.request_id}] 生成失败")
            return Failed(message=str(e))

        logger.info(
            f"[{request.request_id}] 生成完成: {page_count}页, {len(pdf_bytes)}B, 签名域{len(field_names)}个"
        )
        return Completed(
            pdf_bytes=pdf_bytes,
            pdf_base64=encode_pdf_base64(pdf_bytes),
            page_count=page_count,
            descriptions=[s.description for s in sources],
            field_names=field_names,
        )

    def _other_sources(self, request: GeneratePdfRequest) -> list[PdfResult]:
        return [
            PdfResult(
                pdf_bytes=decode_pdf_base64(data),
                type=PdfResultType.OTHER,
                description=f"เอกสารแนบ {i}",
            )
            for i, data in enumerate(request.other_pdfs, start=1)
        ]
