from __future__ import annotations

from pathlib import Path
from typing import Iterable, Tuple

from PIL import Image, ImageDraw, ImageFont

from ..models import PdfTable

TABLE_COLOR = (255, 0, 0, 200)

# Palette cycled across column bands
COLUMN_COLORS = [
    (0, 0, 255, 60),  # Blue
    (0, 180, 0, 60),  # Green
    (255, 165, 0, 60),  # Orange
    (128, 0, 128, 60),  # Purple
    (0, 200, 200, 60),  # Cyan
    (255, 105, 180, 60),  # Pink
]


def _to_image_y(y: float, page_height: float, scale: float) -> float:
    """Map a y-up page coordinate to a top-down image coordinate."""
    return (page_height - y) * scale


def _table_rect(
    table: PdfTable, page_height: float, scale: float
) -> Tuple[float, float, float, float]:
    x0, y_bottom, x1, y_top = table.bbox
    return (
        x0 * scale,
        _to_image_y(y_top, page_height, scale),
        x1 * scale,
        _to_image_y(y_bottom, page_height, scale),
    )


def draw_table_overlay(
    page_width: float,
    page_height: float,
    tables: Iterable[PdfTable],
    out_path: Path,
    scale: float = 1.0,
    background: Image.Image | None = None,
) -> Path:
    """Render table boxes and column bands as an overlay PNG for visual QA.

    If `background` is provided it is used as the base (resized to
    page dims * scale when needed).
    """
    img_w = int(page_width * scale)
    img_h = int(page_height * scale)
    if background is not None:
        img = background.convert("RGBA")
        if img.size != (img_w, img_h):
            img = img.resize((img_w, img_h))
    else:
        img = Image.new("RGBA", (img_w, img_h), (255, 255, 255, 255))

    draw = ImageDraw.Draw(img, "RGBA")
    font = ImageFont.load_default()

    for table in tables:
        left, top, right, bottom = _table_rect(table, page_height, scale)
        for i, band in enumerate(table.columns):
            color = COLUMN_COLORS[i % len(COLUMN_COLORS)]
            draw.rectangle(
                [band.x * scale, top, band.x2 * scale, bottom],
                fill=color,
            )
        draw.rectangle([left, top, right, bottom], outline=TABLE_COLOR, width=2)
        draw.text(
            (left, max(0, top - 12)),
            f"T{table.table_number}",
            fill=TABLE_COLOR,
            font=font,
        )

    out_path.parent.mkdir(parents=True, exist_ok=True)
    img.convert("RGB").save(out_path)
    return out_path
