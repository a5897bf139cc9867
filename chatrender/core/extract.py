"""plain-text extraction from uploaded files."""

import logging
from io import BytesIO
from pathlib import Path
from typing import Optional

from markitdown import MarkItDown, StreamInfo

logger = logging.getLogger(__name__)

TEXT_MIME_PREFIX = "text/"
JSON_MIME_TYPE = "application/json"


class FileParseError(RuntimeError):
    """raised when a file cannot be converted to text."""


def parse_file(filename: str, data: bytes, mime_type: Optional[str]) -> str:
    """
    extracts plain text from a file's contents.

    Text and JSON files are decoded directly; anything else goes through
    MarkItDown.

    Args:
        filename: original file name (used to pick a converter)
        data: file contents
        mime_type: declared MIME type (required)

    Returns:
        extracted text

    Raises:
        FileParseError: if the MIME type is missing or conversion fails
    """
    if not mime_type:
        raise FileParseError(f"Failed to parse file: missing MIME type for {filename}")

    logger.debug("Parsing %s as %s", filename, mime_type)
    try:
        if mime_type.startswith(TEXT_MIME_PREFIX) or mime_type == JSON_MIME_TYPE:
            return data.decode("utf-8", errors="replace")

        stream_info = StreamInfo(
            mimetype=mime_type,
            filename=filename,
            extension=Path(filename).suffix or None,
        )
        result = MarkItDown().convert_stream(BytesIO(data), stream_info=stream_info)
        return str(result.text_content)
    except Exception as e:
        logger.error("Error parsing file %s: %s", filename, e)
        raise FileParseError(f"Failed to parse file: {e}") from e
