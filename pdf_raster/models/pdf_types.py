"""
Pydantic models for image extraction results
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class ExtractionStatus(str, Enum):
    """Outcome of decoding one image XObject"""
    DECODED = "decoded"
    SKIPPED = "skipped"  # Terminal filter has no raster decoder
    FAILED = "failed"


class ImageExtractionResult(BaseModel):
    """Result for a single image XObject on a page"""
    page: int  # 1-based page number
    name: str  # XObject resource name (e.g., '/Im1')
    status: ExtractionStatus
    filter: Optional[str] = None  # Terminal filter, or the whole chain if it could not be read
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None  # PixelFormat name of the decoded raster
    paletteSize: Optional[int] = None
    errorKind: Optional[str] = None  # Exception class name when status is failed
    error: Optional[str] = None
    raster: Optional[Any] = Field(default=None, exclude=True)  # DecodedRaster, kept only on request
