"""
PDF Raster Extraction

Decodes embedded PDF image XObjects (DCTDecode, FlateDecode and
CCITTFaxDecode, optionally behind generic filters) into rasters with an
explicit pixel format and palette.
"""

__version__ = "1.0.0"

from pdf_raster.engine.config import ExtractionOptions
from pdf_raster.extractors.filter_chain import resolve_filter_chain
from pdf_raster.extractors.image_extractor import (
    decode_image,
    extract_document_images,
    extract_images,
    extract_page_images,
    get_image,
    is_image,
    iter_page_images,
)
from pdf_raster.models.colorspace import CMYK, RGB, Gray, Indexed, parse_color_space
from pdf_raster.models.image_object import ImageObject
from pdf_raster.models.pdf_types import ExtractionStatus, ImageExtractionResult
from pdf_raster.models.raster import DecodedRaster, FaxDecodeParameters, ImageDescriptor, PixelFormat
from pdf_raster.utils.validation import PdfRasterError

__all__ = [
    'ExtractionOptions',
    'resolve_filter_chain',
    'decode_image',
    'extract_document_images',
    'extract_images',
    'extract_page_images',
    'get_image',
    'is_image',
    'iter_page_images',
    'CMYK',
    'RGB',
    'Gray',
    'Indexed',
    'parse_color_space',
    'ImageObject',
    'ExtractionStatus',
    'ImageExtractionResult',
    'DecodedRaster',
    'FaxDecodeParameters',
    'ImageDescriptor',
    'PixelFormat',
    'PdfRasterError',
]
