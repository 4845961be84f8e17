# processing/shared/file_utils.py
"""Utilities for opening dump archives as binary streams."""

import bz2
import gzip
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from wikipedia_stats.processing.shared.constants import COMPRESSION_SUFFIXES
from wikipedia_stats.processing.shared.error_handling import UnreadableFile

logger = logging.getLogger(__name__)


def compression_of(file_name: str) -> Optional[str]:
    """Compression format implied by a file name, or None for plain files."""
    lowered = file_name.lower()
    for suffix, compression in COMPRESSION_SUFFIXES.items():
        if lowered.endswith(suffix):
            return compression
    return None


def wrap_compression(file_obj: BinaryIO, file_name: str) -> BinaryIO:
    """Wrap a raw binary stream in the decompressor its file name asks for."""
    compression = compression_of(file_name)
    if compression == "bz2":
        logger.debug("File extension indicates bz2 compression, wrapping file object accordingly.")
        return bz2.BZ2File(file_obj, "rb")
    if compression == "gzip":
        logger.debug("File extension indicates gzip compression, wrapping file object accordingly.")
        return gzip.GzipFile(fileobj=file_obj, mode="rb")
    logger.debug("No compression detected based on file extension, returning raw file object.")
    return file_obj


@contextmanager
def open_dump(path: Union[str, Path], buffer_size: int) -> Iterator[BinaryIO]:
    """
    Open a dump archive as a decompressed binary stream.

    Args:
        path: Local path of the archive
        buffer_size: Read buffer of the underlying file in bytes

    Yields:
        Binary stream of the decompressed XML

    Raises:
        UnreadableFile: If the file cannot be opened
    """
    file_name = str(path)
    try:
        raw = open(file_name, "rb", buffering=buffer_size)
    except OSError as e:
        raise UnreadableFile(f"Cannot open dump file: {e.strerror or e}", file_name=file_name) from e

    stream = None
    try:
        stream = wrap_compression(raw, file_name)
        yield stream
    finally:
        if stream is not None and stream is not raw:
            safe_close(stream)
        safe_close(raw)


def safe_close(stream: Optional[BinaryIO]) -> None:
    """
    Safely close a stream, catching and logging exceptions.

    Args:
        stream: Stream to close
    """
    if stream:
        try:
            stream.close()
        except Exception as e:
            logger.warning(f"Error closing stream: {e}")
