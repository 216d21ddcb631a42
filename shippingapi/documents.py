"""
Label and manifest document writers.

Documents come back either inline (``BASE64``, optionally split into pages) or
as a ``URL`` to download. ``write_to_stream`` handles both; ``save_documents``
writes a response's documents into a directory.
"""

import asyncio
import base64
import binascii
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional, Union

import httpx

from shippingapi.config import settings
from shippingapi.exceptions import DocumentError
from shippingapi.logger import get_logger
from shippingapi.models.shipping import Document

logger = get_logger(__name__)

NextStream = Callable[[Optional[BinaryIO], int], BinaryIO]


def _decode(contents: Optional[str]) -> bytes:
    if not contents:
        raise DocumentError("Document has no contents")
    try:
        return base64.b64decode(contents, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DocumentError(f"Document contents are not valid base64: {str(e)}") from e


async def write_to_stream(
    document: Document,
    stream: Optional[BinaryIO] = None,
    next_stream: Optional[NextStream] = None,
    close_stream: bool = False,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> Optional[BinaryIO]:
    """
    Write a document to a binary stream.

    Args:
        document: Document from a shipment or manifest response
        stream: Stream to write to. May be None when ``next_stream`` is given.
        next_stream: Called as ``next_stream(previous_stream, page_number)``
                     before each page (1-based); returns the stream for that
                     page. Closing the previous stream is up to the callback.
        close_stream: Close the last stream written to before returning
        transport: Optional httpx transport for URL documents

    Returns:
        The last stream written to

    Raises:
        DocumentError: If the document cannot be decoded, downloaded or written
    """
    content_type = (document.content_type or "").upper()

    if content_type == "BASE64":
        if document.pages:
            pages = [page.contents for page in document.pages]
        else:
            pages = [document.contents]
        for page_number, contents in enumerate(pages, start=1):
            if next_stream is not None:
                stream = next_stream(stream, page_number)
            if stream is None:
                raise DocumentError("No stream to write the document to")
            stream.write(_decode(contents))

    elif content_type == "URL":
        if not document.contents:
            raise DocumentError("URL document has no download location")
        if next_stream is not None:
            stream = next_stream(stream, 1)
        if stream is None:
            raise DocumentError("No stream to write the document to")
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(settings.http_timeout),
                transport=transport,
                follow_redirects=True
            ) as client:
                async with client.stream("GET", document.contents) as response:
                    response.raise_for_status()
                    async for chunk in response.aiter_bytes():
                        stream.write(chunk)
        except httpx.HTTPError as e:
            raise DocumentError(f"Document download failed: {str(e)}") from e

    else:
        raise DocumentError(f"Unsupported document content type: {document.content_type}")

    if close_stream and stream is not None:
        stream.close()
    return stream


def save_documents(
    documents: List[Document],
    directory: Union[str, Path],
    base_name: str,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> List[Path]:
    """
    Write documents into ``directory``, one file per document page.

    Multi-page documents are written as ``<base>[-<n>]p<page>.<format>``.

    Returns:
        List[Path]: Paths of the files written
    """
    target = Path(directory)
    target.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []

    for index, document in enumerate(documents):
        stem = base_name if len(documents) == 1 else f"{base_name}-{index + 1}"
        extension = (document.file_format or "bin").lower()
        multi_page = bool(document.pages) and len(document.pages) > 1

        opened: List[BinaryIO] = []

        def next_stream(previous: Optional[BinaryIO], page: int) -> BinaryIO:
            if previous is not None:
                previous.close()
            name = f"{stem}p{page}.{extension}" if multi_page else f"{stem}.{extension}"
            path = target / name
            written.append(path)
            opened.append(open(path, "wb"))
            return opened[-1]

        try:
            asyncio.run(write_to_stream(document, next_stream=next_stream, transport=transport))
        finally:
            for stream in opened:
                stream.close()
        logger.info(f"Wrote {document.type or 'document'} to {written[-1]}")

    return written
