"""
pytest 配置与公共 fixtures

测试不依赖泰文生产字体：整份文档使用 reportlab 自带的 Vera TTF，
版面引擎单测使用内置的 Helvetica（无需注册）。

使用方式：
    def test_something(font_library, make_pdf):
        pdf = make_pdf(["MAIN"])
"""

from __future__ import annotations

import tempfile
from io import BytesIO
from pathlib import Path
from typing import Callable, Generator

import pytest
import reportlab
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen.canvas import Canvas

from sarabun_pdf.config import RuntimeConfig
from sarabun_pdf.layout.fonts import DocumentFonts, FileFontSource, FontLibrary
from sarabun_pdf.layout.page_flow import PageFlowController, PageFurniture
from sarabun_pdf.layout.text_flow import TextFlowEngine
from sarabun_pdf.models import BookRelate, GeneratePdfRequest, SignerInfo

VERA_DIR = Path(reportlab.__file__).parent / "fonts"


# ============================================================================
# 绘制记录
# ============================================================================

class RecordingCanvas(Canvas):
    """记录绘制调用的 canvas（仍然正常输出PDF）"""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("pagesize", A4)
        super().__init__(BytesIO(), *args, **kwargs)
        self.page_index = 0
        self.ops: list[tuple[int, str, tuple]] = []

    def _record(self, kind: str, *args) -> None:
        self.ops.append((self.page_index, kind, args))

    def line(self, x1, y1, x2, y2):
        self._record("line", x1, y1, x2, y2)
        super().line(x1, y1, x2, y2)

    def rect(self, x, y, width, height, stroke=1, fill=0):
        self._record("rect", x, y, width, height, stroke, fill)
        super().rect(x, y, width, height, stroke=stroke, fill=fill)

    def drawString(self, x, y, text, *args, **kwargs):
        self._record("text", x, y, text)
        super().drawString(x, y, text, *args, **kwargs)

    def drawCentredString(self, x, y, text, *args, **kwargs):
        self._record("centred", x, y, text)
        super().drawCentredString(x, y, text, *args, **kwargs)

    def showPage(self):
        self.page_index += 1
        super().showPage()

    def calls(self, kind: str) -> list[tuple]:
        return [args for _, k, args in self.ops if k == kind]


class RecordingFurniture(PageFurniture):
    """记录页面装饰（页码戳不真正绘制泰文数字）"""

    def __init__(self, book_no: str = "BK-1"):
        super().__init__("Helvetica", book_no)
        self.pages: list[int] = []
        self.ordinals: list[int] = []

    def draw(self, canvas, page_number: int) -> None:
        self.pages.append(page_number)
        super().draw(canvas, page_number)

    def draw_ordinal(self, canvas, page_number: int) -> None:
        self.ordinals.append(page_number)


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def runtime_config() -> RuntimeConfig:
    """运行期配置（默认值）"""
    return RuntimeConfig()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ============================================================================
# 字体 Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def vera_paths() -> tuple[Path, Path]:
    """reportlab 自带的 Vera 字体"""
    return VERA_DIR / "Vera.ttf", VERA_DIR / "VeraBd.ttf"


@pytest.fixture(scope="session")
def font_library(vera_paths) -> FontLibrary:
    """进程级字体库（会话级别）"""
    regular, bold = vera_paths
    return FontLibrary.from_source(FileFontSource(regular, bold), family="Vera")


@pytest.fixture
def builtin_fonts() -> DocumentFonts:
    """内置 Helvetica 字体名"""
    return DocumentFonts("Helvetica", "Helvetica-Bold")


# ============================================================================
# 版面 Fixtures
# ============================================================================

@pytest.fixture
def canvas() -> RecordingCanvas:
    return RecordingCanvas()


@pytest.fixture
def furniture() -> RecordingFurniture:
    return RecordingFurniture()


@pytest.fixture
def flow(canvas: RecordingCanvas, furniture: RecordingFurniture) -> PageFlowController:
    """未启动的分页控制器"""
    return PageFlowController(canvas, furniture)


@pytest.fixture
def text_flow() -> TextFlowEngine:
    return TextFlowEngine()


# ============================================================================
# 数据 Fixtures
# ============================================================================

@pytest.fixture
def make_signer() -> Callable[..., SignerInfo]:
    """签署人工厂"""

    def _make(first: str = "Somchai", last: str = "Jaidee", email: str | None = "somchai@example.go.th", **kwargs) -> SignerInfo:
        kwargs.setdefault("prefix_name", "Mr.")
        kwargs.setdefault("position_name", "Director")
        return SignerInfo(firstname=first, lastname=last, email=email, **kwargs)

    return _make


@pytest.fixture
def make_relate() -> Callable[..., BookRelate]:
    """请求中的关系人工厂"""

    def _make(first: str, email: str | None = None, position: str | None = "Officer") -> BookRelate:
        return BookRelate(
            prefix_name="Ms.",
            firstname=first,
            lastname="Test",
            position_name=position,
            email=email or f"{first.lower()}@example.go.th",
        )

    return _make


@pytest.fixture
def memo_request(make_relate) -> GeneratePdfRequest:
    """示例备忘录请求（camelCase 字段）"""
    return GeneratePdfRequest.model_validate({
        "requestId": "req-memo-1",
        "bookTypeCode": "memo",
        "bookTitle": "Annual budget review",
        "bookNo": "DE 0001/2567",
        "dateThai": "1 January 2567",
        "divisionName": "Digital Office",
        "recipients": "Permanent Secretary",
        "bookContent": [
            {"bookContentTitle": "Subject", "bookContent": "<p>Please review the attached budget.</p>"},
        ],
        "bookSigned": [make_relate("Anan").model_dump()],
        "bookSubmited": [make_relate("Boon").model_dump()],
        "bookLearner": [make_relate("Chai").model_dump()],
    })


@pytest.fixture
def make_pdf() -> Callable[[list[str]], bytes]:
    """生成每页一个标记文字的PDF"""

    def _make(markers: list[str]) -> bytes:
        buffer = BytesIO()
        c = Canvas(buffer, pagesize=A4)
        for marker in markers:
            c.setFont("Helvetica", 24)
            c.drawString(100, 700, marker)
            c.showPage()
        c.save()
        return buffer.getvalue()

    return _make
