"""Exporters for laid out MText."""

from .pdf_preview import PdfPreviewRenderer

__all__ = ["PdfPreviewRenderer"]
