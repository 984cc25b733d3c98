"""
文档合并器 - 按业务顺序拼接页树并追加签名页块

职责：
1. 合并顺序由调用方给定（主文档 → 备忘录 → 其他附件），页树直接拼接不重绘
2. 每个呈报人一个页块（角色 Submit），随后每个受文人一个页块（角色 Learner），每块从新页开始
3. 页块的页码戳接续源文档总页数；签名域文档序号取页块的绝对页码
4. 合并后按页面上的 /Sig 控件重建 /AcroForm，保证签名域全局唯一
5. 序列化输出超过阈值时缓冲落盘到临时文件，阈值以下全程内存；返回值始终为完整 bytes

依赖：
- pypdf: 页树拼接
- reportlab: 页块绘制（经 LayoutToolkit）

测试要点：
- test_empty_sources_raises: 无源文档 → MergeError
- test_invalid_source_raises: 源文档无法解析 → MergeError（无部分产物）
- test_merge_order: 主文档/备忘录/其他/呈报页块/受文页块的页序
- test_unique_field_names: N 个签署人 × M 份文档 → N×M 个不同签名域
"""

from __future__ import annotations

import logging
import tempfile
from io import BytesIO
from typing import TYPE_CHECKING

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError

from ..config import LayoutConfig, MergeConfig
from ..interfaces import IDocumentComposer, MergeError
from ..layout.constants import (
    CONTINUATION_TOP_Y,
    FONT_SIZE_BLOCK_HEADING,
    FONT_SIZE_FIELD_VALUE,
)
from ..layout.signature import install_acroform
from ..layout.toolkit import LayoutToolkit
from ..models import (
    ComposedDocument,
    PageBlock,
    PageBlockKind,
    RoleTag,
    SignBoxType,
    SignerInfo,
)

if TYPE_CHECKING:
    from ..layout.fonts import FontLibrary
    from ..layout.text_flow import TextFlowEngine

logger = logging.getLogger(__name__)

SUBMIT_HEADING_GAP = 80.0
LEARNER_HEADING_GAP = 30.0


class DocumentComposer(IDocumentComposer):
    """文档合并器"""

    def __init__(
        self,
        fonts: FontLibrary,
        merge: MergeConfig | None = None,
        layout: LayoutConfig | None = None,
        text_flow: TextFlowEngine | None = None,
    ):
        self.fonts = fonts
        self.merge = merge or MergeConfig()
        self.layout = layout or LayoutConfig()
        self.text_flow = text_flow

    # ------------------------------------------------------------------
    # 合并计划
    # ------------------------------------------------------------------

    def plan(
        self,
        sources: list[bytes],
        submitters: list[SignerInfo],
        learners: list[SignerInfo],
        signers: list[SignerInfo] | None = None,
        book_no: str = "",
    ) -> ComposedDocument:
        """
        生成合并计划

        Raises:
            MergeError: 没有源文档
        """
        if not sources:
            raise MergeError("没有可合并的PDF")

        summary = [s.full_name for s in (signers or []) if s.full_name]
        if not summary:
            summary = [l.full_name for l in learners if l.full_name]

        blocks = [PageBlock(kind=PageBlockKind.SUBMIT, signer=s) for s in submitters]
        blocks += [
            PageBlock(kind=PageBlockKind.LEARNER, signer=l, summary_names=summary)
            for l in learners
        ]
        return ComposedDocument(sources=tuple(sources), blocks=tuple(blocks), book_no=book_no or "")

    def compose(
        self,
        sources: list[bytes],
        submitters: list[SignerInfo],
        learners: list[SignerInfo],
        signers: list[SignerInfo] | None = None,
        book_no: str = "",
    ) -> bytes:
        return self.render(self.plan(sources, submitters, learners, signers, book_no))

    # ------------------------------------------------------------------
    # 执行
    # ------------------------------------------------------------------

    def render(self, document: ComposedDocument) -> bytes:
        """执行合并计划"""
        readers = [self._read_source(i, data) for i, data in enumerate(document.sources)]
        source_pages = sum(len(r.pages) for r in readers)

        writer = PdfWriter()
        for reader in readers:
            for page in reader.pages:
                writer.add_page(page)

        if document.blocks:
            blocks_pdf = self.render_blocks(document, page_offset=source_pages)
            for page in PdfReader(BytesIO(blocks_pdf)).pages:
                writer.add_page(page)

        field_names = install_acroform(writer)
        logger.info(
            f"合并完成: 源文档{len(readers)}份/{source_pages}页, 追加页块{len(document.blocks)}个, "
            f"签名域{len(field_names)}个"
        )
        return self._write(writer)

    def render_blocks(self, document: ComposedDocument, page_offset: int) -> bytes:
        """绘制追加页块（页码接续源文档）"""
        fonts = self.fonts.open_document_fonts()
        with LayoutToolkit(
            fonts,
            book_no=document.book_no,
            page_number_offset=page_offset,
            layout=self.layout,
            text_flow=self.text_flow,
        ) as kit:
            submit_index = learner_index = 0
            for block in document.blocks:
                if kit.flow.page_count == 0:
                    kit.start(CONTINUATION_TOP_Y)
                else:
                    kit.new_page()
                doc_index = kit.flow.page_number

                if block.kind is PageBlockKind.SUBMIT:
                    submit_index += 1
                    kit.draw_centered_text(
                        SignBoxType.SUBMIT, size=FONT_SIZE_BLOCK_HEADING, bold=True, gap=SUBMIT_HEADING_GAP,
                    )
                    kit.draw_signature(block.signer, RoleTag.SUBMIT, doc_index, submit_index, caption=SignBoxType.SUBMIT)
                else:
                    learner_index += 1
                    if block.summary_names:
                        kit.draw_paragraphs(
                            f"{SignBoxType.LEARNER} " + ", ".join(block.summary_names),
                            size=FONT_SIZE_FIELD_VALUE,
                        )
                        kit.skip(LEARNER_HEADING_GAP)
                    kit.draw_signature(block.signer, RoleTag.LEARNER, doc_index, learner_index, caption=SignBoxType.LEARNER)

            return kit.finish()

    def _read_source(self, index: int, data: bytes) -> PdfReader:
        if not data:
            raise MergeError(f"第{index + 1}份PDF为空")
        try:
            reader = PdfReader(BytesIO(data))
            page_count = len(reader.pages)
        except (PdfReadError, ValueError, KeyError, TypeError) as e:
            raise MergeError(f"第{index + 1}份PDF无法解析: {e}") from e
        if page_count == 0:
            raise MergeError(f"第{index + 1}份PDF没有页面")
        return reader

    def _write(self, writer: PdfWriter) -> bytes:
        """
        序列化合并结果

        临时文件只约束 writer 序列化过程中的缓冲：输出超过阈值后写入磁盘。
        源文档与返回值仍为完整 bytes。
        """
        threshold = self.merge.spill_threshold_bytes
        with tempfile.SpooledTemporaryFile(max_size=threshold, dir=self.merge.temp_dir) as spool:
            writer.write(spool)
            size = spool.tell()
            if size > threshold:
                logger.info(f"合并输出 {size}B 超过阈值 {threshold}B，序列化缓冲已写入临时文件")
            spool.seek(0)
            return spool.read()
