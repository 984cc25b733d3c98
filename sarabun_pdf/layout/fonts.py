"""
字体资源 - 进程级不可变字体字节 + 每文档字体句柄

职责：
1. 启动时一次性读取 TTF 字节（FontLibrary，初始化后不再修改，可并发读取）
2. 每个字体库只向 reportlab 全局注册表注册一次 TTFont（首次派生句柄时）；
   子集化状态由 TTFont 按 canvas 文档分别保存，多份文档共用同一注册名
3. 字体缺失/损坏 → ResourceError（生成无法继续）

依赖：
- reportlab: TTFont / pdfmetrics

测试要点：
- test_missing_font_raises: 字体文件缺失
- test_registry_does_not_grow: 连续生成多份文档，全局字体注册表不增长
"""

from __future__ import annotations

import logging
import threading
import uuid
from io import BytesIO
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from ..interfaces import IFontSource, ResourceError
from ..models import FontVariant

if TYPE_CHECKING:
    from ..config import RuntimeConfig

logger = logging.getLogger(__name__)


class FileFontSource(IFontSource):
    """从文件系统读取字体字节"""

    def __init__(self, regular_path: str | Path, bold_path: str | Path | None = None):
        self.paths = {
            FontVariant.REGULAR: Path(regular_path),
            FontVariant.BOLD: Path(bold_path) if bold_path else Path(regular_path),
        }

    def load_bytes(self, variant: FontVariant) -> bytes:
        path = self.paths[variant]
        if not path.exists():
            raise ResourceError(f"字体文件不存在: {path}")
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ResourceError(f"字体文件不可读: {path}: {e}") from e
        if not data:
            raise ResourceError(f"字体文件为空: {path}")
        return data


class DocumentFonts:
    """文档字体句柄（已注册到 reportlab 的字体名）"""

    def __init__(self, regular: str, bold: str):
        self.regular = regular
        self.bold = bold

    def name(self, variant: FontVariant) -> str:
        return self.bold if variant is FontVariant.BOLD else self.regular


class FontLibrary:
    """进程级字体库（只持有不可变字节）"""

    def __init__(self, regular: bytes, bold: bytes | None = None, family: str = "THSarabunNew"):
        if not regular:
            raise ResourceError("缺少常规字体字节")
        self.family = family
        self._data = MappingProxyType({
            FontVariant.REGULAR: bytes(regular),
            FontVariant.BOLD: bytes(bold) if bold else bytes(regular),
        })
        # 注册名带库级令牌，同一进程内多个字体库互不覆盖
        self._token = uuid.uuid4().hex[:10]
        self._lock = threading.Lock()
        self._document_fonts: DocumentFonts | None = None

    @classmethod
    def from_source(cls, source: IFontSource, family: str = "THSarabunNew") -> FontLibrary:
        """从字体来源加载（启动时调用一次）"""
        regular = source.load_bytes(FontVariant.REGULAR)
        bold = source.load_bytes(FontVariant.BOLD)
        logger.info(f"字体已加载: {family} regular={len(regular)}B bold={len(bold)}B")
        return cls(regular, bold, family=family)

    @classmethod
    def from_config(cls, config: RuntimeConfig) -> FontLibrary:
        source = FileFontSource(config.fonts.regular_path, config.fonts.bold_path)
        return cls.from_source(source, family=config.fonts.family)

    def font_bytes(self, variant: FontVariant) -> bytes:
        return self._data[variant]

    def open_document_fonts(self) -> DocumentFonts:
        """
        返回文档字体句柄

        首次调用时解析字节并注册；之后的文档复用同一注册名，
        TTFont 以 canvas 文档为键保存子集状态，文档之间不共享子集。
        """
        with self._lock:
            if self._document_fonts is None:
                names = {}
                for variant in (FontVariant.REGULAR, FontVariant.BOLD):
                    name = f"{self.family}-{variant.value}-{self._token}"
                    try:
                        font = TTFont(name, BytesIO(self._data[variant]))
                    except Exception as e:
                        raise ResourceError(f"字体解析失败 ({variant.value}): {e}") from e
                    pdfmetrics.registerFont(font)
                    names[variant] = name
                self._document_fonts = DocumentFonts(names[FontVariant.REGULAR], names[FontVariant.BOLD])
                logger.debug(f"字体已注册: {names[FontVariant.REGULAR]}, {names[FontVariant.BOLD]}")
            return self._document_fonts
