"""
Extraction Engine

Configuration for batch image extraction.
"""

from pdf_raster.engine.config import ExtractionOptions

__all__ = [
    'ExtractionOptions',
]
