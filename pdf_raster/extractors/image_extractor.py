"""
PDF Image Extraction Module

Finds image XObjects on pages opened with pikepdf and decodes them into
rasters through the filter chain resolver. Each image is decoded
independently: a failure is recorded on that image's result and extraction
moves on to the next one.
"""

import io
import logging
from typing import Any, Iterator, List, Optional, Set, Tuple

import pikepdf
from pikepdf import Page

from pdf_raster.constants.pdf_keys import (
    KEY_FILTER,
    KEY_HEIGHT,
    KEY_PARENT,
    KEY_RESOURCES,
    KEY_SUBTYPE,
    KEY_TYPE,
    KEY_WIDTH,
    KEY_XOBJECT,
    VAL_FORM,
    VAL_IMAGE,
    VAL_XOBJECT,
)
from pdf_raster.engine.config import ExtractionOptions
from pdf_raster.extractors.filter_chain import resolve_filter_chain
from pdf_raster.models.image_object import ImageObject
from pdf_raster.models.pdf_types import ExtractionStatus, ImageExtractionResult
from pdf_raster.models.raster import DecodedRaster
from pdf_raster.utils.pdf_objects import filter_names, get_int, get_value, is_dictionary, name_of
from pdf_raster.utils.validation import NotAnImage, PdfRasterError, UnsupportedEncoding, error_kind

logger = logging.getLogger(__name__)


# --- Image Objects ---

def _lookup(obj: Any, key: str) -> Any:
    if isinstance(obj, ImageObject):
        return obj.get(key)
    return get_value(obj, key)


def is_image(obj: Any) -> bool:
    """
    Check whether an object is flagged as an image.

    /Subtype must be /Image; /Type may be absent, otherwise it must be /XObject.
    """
    if name_of(_lookup(obj, KEY_SUBTYPE)) != VAL_IMAGE:
        return False
    object_type = _lookup(obj, KEY_TYPE)
    return object_type is None or name_of(object_type) == VAL_XOBJECT


def check_image_size(obj: Any, max_image_pixels: Optional[int]) -> None:
    """
    Raises:
        UnsupportedEncoding: If the declared pixel count exceeds max_image_pixels
    """
    if max_image_pixels is None:
        return
    attributes = obj.attributes if isinstance(obj, ImageObject) else obj
    width = get_int(attributes, KEY_WIDTH, 0)
    height = get_int(attributes, KEY_HEIGHT, 0)
    if width * height > max_image_pixels:
        raise UnsupportedEncoding(
            f"Image of {width}x{height} pixels exceeds the limit of {max_image_pixels} pixels"
        )


def decode_image(obj: Any, options: Optional[ExtractionOptions] = None) -> Optional[DecodedRaster]:
    """
    Decode one image object.

    Args:
        obj: pikepdf Stream or ImageObject view
        options: Extraction options (only max_image_pixels applies here)

    Returns:
        The decoded raster, or None if the terminal filter is not recognized

    Raises:
        NotAnImage: If the object is not flagged as an image
        PdfRasterError: Any typed decoding failure
    """
    if not is_image(obj):
        raise NotAnImage(
            f"Object with /Type {name_of(_lookup(obj, KEY_TYPE))} and "
            f"/Subtype {name_of(_lookup(obj, KEY_SUBTYPE))} is not an image"
        )

    options = options or ExtractionOptions.default()
    check_image_size(obj, options.max_image_pixels)
    return resolve_filter_chain(obj)


# --- Page Walking ---

def _page_resources(page: Any) -> Any:
    """Resources of a page, inherited from the page tree when the page has none"""
    node = page
    while node is not None:
        resources = get_value(node, KEY_RESOURCES)
        if resources is not None:
            return resources
        node = get_value(node, KEY_PARENT)
    return None


def _walk_xobjects(resources: Any, prefix: str, visited: Set[Tuple[int, int]]) -> Iterator[Tuple[str, Any]]:
    xobjects = get_value(resources, KEY_XOBJECT)
    if not is_dictionary(xobjects):
        return

    for name, xobject in xobjects.items():
        qualified_name = f"{prefix}{name}"
        subtype = name_of(get_value(xobject, KEY_SUBTYPE))

        if subtype == VAL_IMAGE:
            yield qualified_name, xobject
        elif subtype == VAL_FORM:
            # Forms can be shared between pages and may reference themselves
            objgen = getattr(xobject, 'objgen', (0, 0))
            if objgen != (0, 0):
                if objgen in visited:
                    continue
                visited.add(objgen)
            yield from _walk_xobjects(get_value(xobject, KEY_RESOURCES), qualified_name, visited)


def iter_page_images(page: Any) -> Iterator[Tuple[str, Any]]:
    """
    Yield (name, image stream) for each image XObject a page references.

    Images inside Form XObjects are included, named by their path through
    the forms (e.g. '/Fm1/Im0').
    """
    page_obj = page.obj if isinstance(page, Page) else page
    resources = _page_resources(page_obj)
    if resources is None:
        return
    yield from _walk_xobjects(resources, "", set())


# --- Batch Extraction ---

def _declared_filter(image: Any) -> Optional[str]:
    names = [str(name) for name in filter_names(get_value(image, KEY_FILTER))]
    if not names:
        return None
    return names[-1] if len(names) == 1 else f"[{' '.join(names)}]"


def extract_image(image: Any, page_number: int, name: str,
                  options: Optional[ExtractionOptions] = None) -> ImageExtractionResult:
    """
    Decode one image XObject into a result record.

    Raises:
        PdfRasterError: Only in strict mode
    """
    options = options or ExtractionOptions.default()
    result = ImageExtractionResult(
        page=page_number,
        name=name,
        status=ExtractionStatus.FAILED,
        filter=_declared_filter(image),
        width=get_int(image, KEY_WIDTH),
        height=get_int(image, KEY_HEIGHT),
    )

    try:
        raster = decode_image(image, options)
    except PdfRasterError as e:
        if options.strict:
            raise
        if options.log_failures:
            logger.error(f"Failed to decode image {name} on page {page_number}: {e}")
        result.errorKind = error_kind(e)
        result.error = str(e)
        return result

    if raster is None:
        logger.debug(f"Skipped image {name} on page {page_number} with filter {result.filter}")
        result.status = ExtractionStatus.SKIPPED
        return result

    result.status = ExtractionStatus.DECODED
    result.width = raster.width
    result.height = raster.height
    result.format = raster.format.name
    result.paletteSize = len(raster.palette) if raster.palette else None
    if options.include_pixels:
        result.raster = raster
    return result


def extract_page_images(page: Any, page_number: int,
                        options: Optional[ExtractionOptions] = None) -> List[ImageExtractionResult]:
    """Decode every image XObject of a page"""
    options = options or ExtractionOptions.default()
    results = [
        extract_image(image, page_number, name, options)
        for name, image in iter_page_images(page)
    ]
    decoded = sum(1 for result in results if result.status == ExtractionStatus.DECODED)
    logger.debug(f"Processed page {page_number}: {decoded} of {len(results)} images decoded")
    return results


def extract_document_images(pdf: pikepdf.Pdf, options: Optional[ExtractionOptions] = None,
                            start_page: int = 1,
                            end_page: Optional[int] = None) -> List[List[ImageExtractionResult]]:
    """
    Decode the images of a page range of an open document.

    Returns:
        One list of results per page, in page order; empty for an invalid range
    """
    options = options or ExtractionOptions.default()
    if not options.enabled:
        logger.debug("Image extraction is disabled")
        return []
    if not options.validate():
        raise ValueError(f"Invalid extraction options: {options!r}")

    total_pages = len(pdf.pages)

    # Resolve end_page
    if end_page is None:
        end_page = total_pages

    # Validate page range
    if start_page < 1 or start_page > total_pages:
        logger.error(f"Invalid start_page {start_page} (total pages: {total_pages})")
        return []

    if end_page < start_page or end_page > total_pages:
        logger.error(f"Invalid end_page {end_page} (start_page: {start_page}, total pages: {total_pages})")
        return []

    logger.info(f"Extracting images from pages {start_page} to {end_page} of {total_pages}")

    all_pages_data = []
    for page_number in range(start_page, end_page + 1):
        all_pages_data.append(extract_page_images(pdf.pages[page_number - 1], page_number, options))

    logger.info(f"Extracted images from {len(all_pages_data)} pages")
    return all_pages_data


def extract_images(file_path: str, start_page: int = 1, end_page: Optional[int] = None,
                   options: Optional[ExtractionOptions] = None) -> List[List[ImageExtractionResult]]:
    """Decode the images of a range of pages of a PDF file"""
    with pikepdf.open(file_path) as pdf:
        return extract_document_images(pdf, options, start_page, end_page)


def get_image(file_path: str, page_number: int, name: str) -> Optional[bytes]:
    """
    Decode one image of a page and encode it as PNG.

    Returns:
        PNG bytes, or None if the page has no such image or it cannot be decoded
    """
    with pikepdf.open(file_path) as pdf:
        if page_number < 1 or page_number > len(pdf.pages):
            logger.warning(f"Page {page_number} out of range (1-{len(pdf.pages)})")
            return None

        for image_name, image in iter_page_images(pdf.pages[page_number - 1]):
            if image_name != name:
                continue
            try:
                raster = decode_image(image)
            except PdfRasterError as e:
                logger.error(f"Error extracting image {name} from page {page_number}: {e}")
                return None
            if raster is None:
                logger.warning(f"Image {name} on page {page_number} uses an unsupported filter")
                return None

            buffer = io.BytesIO()
            raster.to_image().save(buffer, format='PNG')
            return buffer.getvalue()

    logger.warning(f"Image {name} not found on page {page_number}")
    return None
