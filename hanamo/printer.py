"""Thermal receipt printing for submitted orders."""

from __future__ import annotations

import os
from pathlib import Path
from time import sleep

from hanamo.config import (
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_TAIL_SPACER_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
)
from hanamo.constant import BRAND_NAME
from hanamo.data import display_name_for_base, display_name_for_milk, display_name_for_topping, ordered_toppings
from hanamo.models import OrderRecord

# Separator tuning values.
_SEPARATOR_HEIGHT_PX = 20
_SEPARATOR_THICKNESS_PX = 5
_SEPARATOR_STRIPE_HEIGHT_PX = 2
_SEPARATOR_PAUSE_SECONDS = 0.1
_HEADER_RIGHT_GUTTER_PX = 8
# Extra vertical headroom to avoid descender clipping on thermal output.
_LINE_EXTRA_PX = 20
_FONT_OVERRIDE_ENV = "HANAMO_PRINTER_FONT_PATH"
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
)


def receipt_lines(record: OrderRecord) -> list[str]:
    """Body lines of the printed receipt, below the order id header."""
    lines = [
        record.name,
        record.phone,
        display_name_for_base(record.base),
        f"    {display_name_for_milk(record.milk)}",
    ]
    lines.extend(f"    + {display_name_for_topping(topping)}" for topping in ordered_toppings(record.toppings))
    return lines


def font_candidates() -> list[str]:
    """Font files to try, in order: env override, configured font, common Linux fonts."""
    override = os.environ.get(_FONT_OVERRIDE_ENV, "").strip()
    ordered = [override, PRINTER_FONT_PATH, *_LINUX_FONT_FALLBACKS]
    return list(dict.fromkeys(path for path in ordered if path))


def load_receipt_fonts() -> tuple[object, object]:
    """Return (body_font, brand_font) cut from the first installed candidate."""
    from PIL import ImageFont

    candidates = font_candidates()
    font_path = next((path for path in candidates if Path(path).is_file()), None)
    if font_path is None:
        raise RuntimeError(
            f"No receipt font installed; point {_FONT_OVERRIDE_ENV} at a .ttf/.otf file "
            f"(looked in {', '.join(candidates)})"
        )
    body_font = ImageFont.truetype(font_path, PRINTER_FONT_SIZE)
    brand_font = ImageFont.truetype(font_path, max(14, PRINTER_FONT_SIZE // 2))
    return (body_font, brand_font)


def printer_status() -> tuple[bool, str]:
    """Report whether a receipt could be printed, without opening the device."""
    try:
        from escpos.printer import Usb  # noqa: F401

        load_receipt_fonts()
    except Exception as exc:
        return (False, f"Printer unavailable: {exc}")
    return (True, "Printer ready")


def _render_line(text: str, font: object) -> object:
    from PIL import Image, ImageDraw

    canvas_height = PRINTER_FONT_SIZE + _LINE_EXTRA_PX
    img = Image.new("1", (PRINTER_WIDTH_PX, canvas_height), color=1)
    draw = ImageDraw.Draw(img)

    bbox = draw.textbbox((0, 0), text, font=font)
    text_height = bbox[3] - bbox[1]

    x = PRINTER_LEFT_INDENT_PX
    y = (canvas_height - text_height) // 2 - bbox[1]
    draw.text((x, y), text, font=font, fill=0)
    return img


def _render_spacer(height_px: int) -> object:
    from PIL import Image

    return Image.new("1", (PRINTER_WIDTH_PX, max(1, height_px)), color=1)


def _render_header(brand: str, order_id: str, brand_font: object, id_font: object) -> object:
    """Brand name on the left, order id flush right."""
    from PIL import Image, ImageDraw

    probe = Image.new("1", (1, 1), color=1)
    probe_draw = ImageDraw.Draw(probe)
    id_bbox = probe_draw.textbbox((0, 0), order_id, font=id_font)
    brand_bbox = probe_draw.textbbox((0, 0), brand, font=brand_font)
    top_padding = 4
    bottom_padding = 12
    content_height = max(id_bbox[3] - id_bbox[1], brand_bbox[3] - brand_bbox[1])
    canvas_height = max(26, content_height + top_padding + bottom_padding)

    img = Image.new("1", (PRINTER_WIDTH_PX, canvas_height), color=1)
    draw = ImageDraw.Draw(img)
    draw.text((PRINTER_LEFT_INDENT_PX, top_padding - brand_bbox[1]), brand, font=brand_font, fill=0)
    id_x = PRINTER_WIDTH_PX - _HEADER_RIGHT_GUTTER_PX - (id_bbox[2] - id_bbox[0]) - id_bbox[0]
    draw.text((id_x, top_padding - id_bbox[1]), order_id, font=id_font, fill=0)
    return img


def _render_separator() -> object:
    from PIL import Image, ImageDraw

    img = Image.new("1", (PRINTER_WIDTH_PX, _SEPARATOR_HEIGHT_PX), color=1)
    draw = ImageDraw.Draw(img)
    top = max(0, (_SEPARATOR_HEIGHT_PX - _SEPARATOR_THICKNESS_PX) // 2)
    bottom = min(_SEPARATOR_HEIGHT_PX - 1, top + _SEPARATOR_THICKNESS_PX - 1)
    draw.rectangle((0, top, PRINTER_WIDTH_PX - 1, bottom), fill=0)
    return img


def _print_separator(printer: object) -> None:
    """Print the separator in short stripes so the bar stays crisp."""
    separator = _render_separator()
    for top in range(0, separator.height, _SEPARATOR_STRIPE_HEIGHT_PX):
        bottom = min(separator.height, top + _SEPARATOR_STRIPE_HEIGHT_PX)
        printer.image(separator.crop((0, top, PRINTER_WIDTH_PX, bottom)))
        if bottom < separator.height:
            sleep(_SEPARATOR_PAUSE_SECONDS)


def print_order_record(record: OrderRecord) -> None:
    """Print one order receipt and cut the ticket at the end."""
    try:
        from escpos.printer import Usb
    except Exception as exc:
        raise RuntimeError(f"Printer dependencies unavailable: {exc}") from exc

    font, brand_font = load_receipt_fonts()
    printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)

    printer.image(_render_header(BRAND_NAME, record.order_id, brand_font, font))
    _print_separator(printer)
    for line in receipt_lines(record):
        printer.image(_render_line(line, font))
    printer.image(_render_spacer(PRINTER_TAIL_SPACER_PX))
    printer.cut()
