"""
版面常量 - A4 页面几何、边距、字号与固定锚点（单位：pt，原点左下）
"""

from reportlab.lib.pagesizes import A4

PAGE_WIDTH, PAGE_HEIGHT = A4  # 595.27 x 841.89

MARGIN_TOP = 70.0
MARGIN_BOTTOM = 70.0
MARGIN_LEFT = 70.0
MARGIN_RIGHT = 70.0

CONTENT_WIDTH = PAGE_WIDTH - MARGIN_LEFT - MARGIN_RIGHT

# 字号
FONT_SIZE_HEADER = 24.0
FONT_SIZE_FIELD = 18.0
FONT_SIZE_FIELD_VALUE = 16.0
FONT_SIZE_CONTENT = 16.0
FONT_SIZE_SPEED_LAYER = 22.0
FONT_SIZE_BLOCK_HEADING = 28.0

# 间距
SPACING_AFTER_HEADER = 30.0
SPACING_BETWEEN_FIELDS = 5.0
SPACING_BEFORE_CONTENT = 14.0
SPACING_BEFORE_SIGNATURES = 40.0
SPACING_BETWEEN_SIGNATURES = 20.0
TEXT_LINE_GAP = 5.0

# 页眉区
LOGO_WIDTH = 120.0
LOGO_HEIGHT = 40.0
LOGO_SPACING = 30.0

# 分页
MIN_Y_POSITION = MARGIN_BOTTOM + 100
PAGE_NUMBER_Y_OFFSET = 15.0
NEW_PAGE_TOP_OFFSET = 50.0
FIRST_PAGE_TOP_Y = PAGE_HEIGHT - MARGIN_TOP
CONTINUATION_TOP_Y = PAGE_HEIGHT - MARGIN_TOP - NEW_PAGE_TOP_OFFSET

# 文号（每页左下）
BOOK_NUMBER_X = MARGIN_LEFT - 20
BOOK_NUMBER_Y = MARGIN_BOTTOM - 30

# 同行双字段中“วันที่”的起点
DATE_X_POSITION = PAGE_WIDTH - 320

# 点线下划线
DOTTED_RULE_DASH = (1, 2)
DOTTED_RULE_OFFSET = 3.0

# 签名框
SIGNATURE_BOX_WIDTH = 180.0
SIGNATURE_BOX_HEIGHT = 50.0
SIGNATURE_BOX_X = PAGE_WIDTH / 2 + 20
SIGNATURE_BOX_COLOR = (0.4, 0.7, 0.9)
SIGNATURE_BOX_DASH = (5, 3)
SIGNATURE_BOX_LINE_WIDTH = 1.5
SIGNATURE_CAPTION_SIZE = 14.0
SIGNATURE_NAME_SIZE = 14.0
SIGNATURE_POSITION_SIZE = 12.0

# 表格
TABLE_FONT_SIZE = 14.0
TABLE_CELL_PADDING = 5.0
TABLE_BORDER_WIDTH = 0.5
TABLE_MIN_ROW_HEIGHT = 20.0
TABLE_LINE_SPACING = 2.0
TABLE_HEADER_GRAY = 0.9
TABLE_SPACING_AFTER = 10.0

# 签署人之间的分隔线
SEPARATOR_GRAY = 0.6
SEPARATOR_DASH = (8, 4)
SEPARATOR_INSET = 50.0
