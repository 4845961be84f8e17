# processing/parser/base_parser.py
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Optional, Union

from wikipedia_stats.config.settings import PARSER_CONFIG
from wikipedia_stats.processing.shared.file_utils import open_dump
from wikipedia_stats.processing.stats import Stats


class BaseParser(ABC):
    """Abstract base class for dump parsers implementing parse_stream."""

    def __init__(
        self,
        buffer_size: int = PARSER_CONFIG['buffer_size'],
        logger: Optional[logging.Logger] = None
    ):
        """Initialize parser with a read buffer size and optional logger."""
        self.buffer_size = buffer_size
        self.logger = logger or logging.getLogger(__name__)

    @abstractmethod
    def parse_stream(
        self,
        stream: BinaryIO,
        file_name: str,
        cancel_event: Optional[threading.Event] = None
    ) -> Stats:
        """
        Parse one decompressed dump stream into a fresh Stats instance.

        Args:
            stream: Binary stream of XML
            file_name: Name of the file being parsed, for error messages
            cancel_event: When set, parsing stops between chunks

        Returns:
            Statistics of every complete page in the stream
        """
        raise NotImplementedError

    def parse_file(
        self,
        path: Union[str, Path],
        cancel_event: Optional[threading.Event] = None
    ) -> Stats:
        """Open, decompress and parse one archive file end to end."""
        file_name = str(path)
        with open_dump(file_name, self.buffer_size) as stream:
            return self.parse_stream(stream, file_name, cancel_event)
