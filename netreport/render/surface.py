"""
Drawing surfaces.

The layout code only talks to the Surface interface. PdfSurface is the
reportlab-backed implementation; it is optional, and PDF_AVAILABLE tells
callers whether it can be used. Coordinates are top-down: y grows toward
the bottom of the page, text is positioned by its baseline.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
import logging
import warnings

logger = logging.getLogger(__name__)

PDF_AVAILABLE = False
_canvas = None
_pdfmetrics = None

try:
    from reportlab.pdfgen import canvas as _canvas
    from reportlab.pdfbase import pdfmetrics as _pdfmetrics
    PDF_AVAILABLE = True
except ImportError:
    pass


@dataclass
class Bounds:
    """Axis-aligned rectangle in surface units."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass
class TextExtents:
    """Measured size of a rendered string."""
    width: float = 0.0
    height: float = 0.0


class Surface(ABC):
    """Abstract drawing surface."""

    @abstractmethod
    def set_font_size(self, size: float) -> None:
        pass

    @abstractmethod
    def measure_text(self, text: str) -> TextExtents:
        """Extents of text in the current font size."""
        pass

    @abstractmethod
    def draw_text(self, text: str, x: float, y: float) -> None:
        """Draw text with its baseline at (x, y)."""
        pass

    @abstractmethod
    def draw_line(self, x1: float, y1: float, x2: float, y2: float, width: float = 0.5) -> None:
        pass

    @abstractmethod
    def draw_rect(self, x: float, y: float, width: float, height: float, fill: bool = True) -> None:
        pass

    def set_color(self, r: float, g: float, b: float) -> None:
        """Set the drawing color; surfaces without color support ignore it."""

    @abstractmethod
    def translate(self, dx: float, dy: float) -> None:
        """Move the origin for all subsequent drawing."""
        pass

    def close(self) -> None:
        """Flush and release the surface."""

    def discard(self) -> None:
        """Release the surface without writing anything."""


class PdfSurface(Surface):
    """Single-page PDF surface backed by a reportlab canvas."""

    FONT_NAME = "Helvetica"

    def __init__(self, path: str | Path, width: float, height: float):
        if not PDF_AVAILABLE:
            raise RuntimeError(
                "reportlab is not installed. Install with: pip install reportlab"
            )
        self.path = Path(path)
        self.width = width
        self.height = height
        self._canvas = _canvas.Canvas(str(self.path), pagesize=(width, height))
        self._font_size = 10.0
        self._dx = 0.0
        self._dy = 0.0
        self._closed = False
        self._canvas.setFont(self.FONT_NAME, self._font_size)

    def _to_pdf(self, x: float, y: float) -> tuple[float, float]:
        return self._dx + x, self.height - (self._dy + y)

    def set_font_size(self, size: float) -> None:
        self._font_size = size
        self._canvas.setFont(self.FONT_NAME, size)

    def measure_text(self, text: str) -> TextExtents:
        width = _pdfmetrics.stringWidth(text, self.FONT_NAME, self._font_size)
        ascent, _descent = _pdfmetrics.getAscentDescent(self.FONT_NAME, self._font_size)
        return TextExtents(width=width, height=ascent)

    def draw_text(self, text: str, x: float, y: float) -> None:
        px, py = self._to_pdf(x, y)
        self._canvas.drawString(px, py, text)

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, width: float = 0.5) -> None:
        self._canvas.setLineWidth(width)
        px1, py1 = self._to_pdf(x1, y1)
        px2, py2 = self._to_pdf(x2, y2)
        self._canvas.line(px1, py1, px2, py2)

    def draw_rect(self, x: float, y: float, width: float, height: float, fill: bool = True) -> None:
        px, py = self._to_pdf(x, y + height)
        self._canvas.rect(px, py, width, height, stroke=0 if fill else 1, fill=1 if fill else 0)

    def set_color(self, r: float, g: float, b: float) -> None:
        self._canvas.setFillColorRGB(r, g, b)
        self._canvas.setStrokeColorRGB(r, g, b)

    def translate(self, dx: float, dy: float) -> None:
        self._dx += dx
        self._dy += dy

    def close(self) -> None:
        """Write the page to disk. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._canvas.showPage()
        self._canvas.save()
        logger.debug("wrote %s", self.path)

    def discard(self) -> None:
        """Drop the page unsaved; the canvas has written nothing to disk yet."""
        if self._closed:
            return
        self._closed = True
        logger.debug("discarded %s", self.path)


def open_pdf_surface(path: str | Path, width: float, height: float) -> PdfSurface | None:
    """
    Create a PDF surface, or return None when one cannot be created.

    Missing reportlab and a missing output directory both yield None with a
    RuntimeWarning; the caller skips rendering entirely in that case.
    """
    path = Path(path)
    if not PDF_AVAILABLE:
        warnings.warn(
            "reportlab is not installed; skipping PDF report. "
            "Install with: pip install reportlab",
            RuntimeWarning,
            stacklevel=2,
        )
        return None
    if not path.parent.is_dir():
        warnings.warn(
            f"Output directory does not exist: {path.parent}; skipping PDF report",
            RuntimeWarning,
            stacklevel=2,
        )
        return None
    return PdfSurface(path, width, height)
