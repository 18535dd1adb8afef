# invoicegen/styling/geometry.py
from __future__ import annotations

from reportlab.lib.pagesizes import A4

# =========================
# Page
# =========================

PAGE_WIDTH = 592
PAGE_HEIGHT = A4[1]

BASE_MARGIN = 30
BASE_MARGIN_TOP = 40
HEADER_MARGIN_TOP = 5
FOOTER_MARGIN_BOTTOM = 5

# Every "does it still fit" decision compares against this. Rows are checked after
# they are placed, so it sits one tall row plus the footer above the page bottom.
MAX_PAGE_HEIGHT = 770

COLUMN_WIDTH = 250  # right-hand info column (title, metas, customer, totals)

# =========================
# Item table columns
# =========================

ITEM_COL_UNIT_PRICE_OFFSET = PAGE_WIDTH * 0.40
ITEM_COL_QUANTITY_OFFSET = PAGE_WIDTH * 0.50
ITEM_COL_TOTAL_HT_OFFSET = PAGE_WIDTH * 0.55
ITEM_COL_DISCOUNT_OFFSET = PAGE_WIDTH * 0.69
ITEM_COL_TAX_OFFSET = PAGE_WIDTH * 0.75
ITEM_COL_TOTAL_TTC_OFFSET = PAGE_WIDTH * 0.85

# =========================
# Typography
# =========================

BASE_TEXT_FONT_SIZE = 8
SMALL_TEXT_FONT_SIZE = 7
LARGE_TEXT_FONT_SIZE = 10
LINE_HEIGHT_RATIO = 1.0

TITLE_FONT_SIZE = 14
TITLE_MARGIN = 6
METAS_FONT_SIZE = 8
DESCRIPTION_FONT_SIZE = 10
NOTES_FONT_SIZE = 9

# =========================
# Blocks
# =========================

CONTACT_MARGIN = 3
CUSTOMER_OFFSET_TOP = 45
IMAGE_HEIGHT = 80
LOGO_GAP = 3

DESCRIPTION_GAP = 10
DESCRIPTION_WIDTH = PAGE_WIDTH - 2 * BASE_MARGIN

ITEM_FONT_SIZE = 8
ITEM_TITLE_MARGIN = 6
ITEMS_PADDING_TOP = 40
ITEM_ROW_GAP = 6
ITEM_NAME_WIDTH = ITEM_COL_UNIT_PRICE_OFFSET - BASE_MARGIN - ITEM_TITLE_MARGIN * 2
ITEM_TEXT_MAX_HEIGHT = ITEM_FONT_SIZE * 3
TABLE_HEADER_HEIGHT = ITEM_FONT_SIZE + ITEM_TITLE_MARGIN + ITEM_TITLE_MARGIN / 2

NOTES_GAP = 10
NOTES_WIDTH = PAGE_WIDTH - BASE_MARGIN * 2 - COLUMN_WIDTH
NOTES_MAX_HEIGHT = MAX_PAGE_HEIGHT * 0.3

TOTAL_MARGIN = 5
TOTALS_GAP_TOP = 10
TOTAL_ROW_HEIGHT = LARGE_TEXT_FONT_SIZE + TOTAL_MARGIN * 2
TOTAL_DISCOUNT_ROW_HEIGHT = TOTAL_ROW_HEIGHT + 5
PAYMENT_TERM_GAP = 5

# Worst-case estimates used before placing a block whose real height is not
# measured yet.
TOTALS_BLOCK_HEIGHT = TOTALS_GAP_TOP + 3 * TOTAL_ROW_HEIGHT + PAYMENT_TERM_GAP + LARGE_TEXT_FONT_SIZE
TOTALS_DISCOUNT_EXTRA = TOTAL_DISCOUNT_ROW_HEIGHT
TABLE_START_ESTIMATE = (
    ITEMS_PADDING_TOP
    + TABLE_HEADER_HEIGHT
    + ITEM_TEXT_MAX_HEIGHT
    + SMALL_TEXT_FONT_SIZE * 3
)
