"""Drawing surfaces, charts and the page layout pass."""

from netreport.render.surface import (
    PDF_AVAILABLE,
    Bounds,
    PdfSurface,
    Surface,
    TextExtents,
    open_pdf_surface,
)
from netreport.render.plot import PlotStyle, draw_bar_chart
from netreport.render.layout import LayoutCursor, RenderPass, RenderState, RenderStateError

__all__ = [
    'PDF_AVAILABLE',
    'Bounds',
    'PdfSurface',
    'Surface',
    'TextExtents',
    'open_pdf_surface',
    'PlotStyle',
    'draw_bar_chart',
    'LayoutCursor',
    'RenderPass',
    'RenderState',
    'RenderStateError',
]
