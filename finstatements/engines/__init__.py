"""Extraction and detection engines."""

from finstatements.engines.inconsistency_detector import InconsistencyDetector
from finstatements.engines.metric_extractor import MetricExtractor
from finstatements.engines.pdf_text_extractor import PdfTextExtractor

__all__ = [
    "PdfTextExtractor",
    "MetricExtractor",
    "InconsistencyDetector",
]
