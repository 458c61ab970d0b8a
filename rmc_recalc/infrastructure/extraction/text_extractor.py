"""Text extraction from uploaded statements (PDF text layer, OCR, plain text)"""

import io
import logging
import os
from typing import List, Optional

import pdfplumber
import pytesseract
from PIL import Image, UnidentifiedImageError

from rmc_recalc.config import settings
from rmc_recalc.domain.exceptions import TextExtractionError, UnsupportedFileError

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".webp"}

# Pages with less text than this are treated as scans
MIN_PAGE_TEXT = 30


def _ocr_image(image: Image.Image) -> str:
    return pytesseract.image_to_string(image, lang=settings.ocr_language)


def read_pdf(content: bytes) -> str:
    """Text layer of each page, falling back to OCR for scanned pages"""
    pages: List[str] = []
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        for number, page in enumerate(pdf.pages, start=1):
            text = (page.extract_text() or "").strip()
            if len(text) < MIN_PAGE_TEXT:
                logger.info("Page without text layer, running OCR", extra={"page": number})
                image = page.to_image(resolution=settings.ocr_resolution).original
                text = _ocr_image(image).strip()
            pages.append(text)
    return "\n".join(pages)


def read_image(content: bytes) -> str:
    with Image.open(io.BytesIO(content)) as image:
        return _ocr_image(image)


def read_text(content: bytes) -> str:
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        return content.decode("latin-1")


def extract_text(content: bytes, filename: str, content_type: Optional[str] = None) -> str:
    """
    Turn an uploaded file into a single text string.

    PDFs go through pdfplumber (OCR for scanned pages), images through
    Tesseract, everything else is decoded as text.

    Raises:
        UnsupportedFileError: Empty upload or unreadable image
        TextExtractionError: PDF/OCR backend failure
    """
    if not content:
        raise UnsupportedFileError("Uploaded file is empty")

    ext = os.path.splitext(filename or "")[-1].lower()
    content_type = (content_type or "").lower()

    try:
        if ext == ".pdf" or content_type == "application/pdf":
            return read_pdf(content)
        if ext in IMAGE_EXTENSIONS or content_type.startswith("image/"):
            return read_image(content)
    except UnidentifiedImageError as e:
        raise UnsupportedFileError(f"{filename} is not a readable image") from e
    except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
        raise TextExtractionError(f"OCR failed for {filename}: {e}") from e
    except Exception as e:
        raise TextExtractionError(f"Could not read {filename}: {e}") from e

    return read_text(content)
