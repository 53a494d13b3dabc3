"""Runtime configuration defaults for the draft cache, order ids and printing."""

from __future__ import annotations

import os
import string

DB_PATH = os.environ.get("HANAMO_DB_PATH", "data/hanamo.db")
DRAFT_KEY = "hanamo_draft"

DEBUG_LOG_PATH = os.environ.get("HANAMO_DEBUG_LOG", "/tmp/hanamo-debug.log")

ORDER_ID_PREFIX = "HANA-"
ORDER_ID_LENGTH = 4
ORDER_ID_ALPHABET = string.ascii_uppercase + string.digits

PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 40
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_LEFT_INDENT_PX = 16
PRINTER_TAIL_SPACER_PX = 70
