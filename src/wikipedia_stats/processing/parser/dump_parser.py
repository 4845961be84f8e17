import logging
import threading
import zlib
from typing import BinaryIO, Optional

from lxml import etree

from wikipedia_stats.config.settings import PARSER_CONFIG
from wikipedia_stats.processing.parser.base_parser import BaseParser
from wikipedia_stats.processing.parser.page_builder import PageRecordBuilder
from wikipedia_stats.processing.shared.error_handling import (
    CorruptCompressedStream,
    MalformedXml,
    ProcessingCancelled,
    WikiStatsError,
)
from wikipedia_stats.processing.stats import Stats

# Errors raised by bz2/gzip readers on damaged or truncated input
DECOMPRESSION_ERRORS = (OSError, EOFError, zlib.error)


class DumpParser(BaseParser):
    """Streaming parser for MediaWiki XML dumps feeding a page builder."""

    def __init__(
        self,
        buffer_size: int = PARSER_CONFIG['buffer_size'],
        root_tag: str = PARSER_CONFIG['root_tag'],
        logger: Optional[logging.Logger] = None
    ):
        super().__init__(buffer_size, logger)
        self.root_tag = root_tag

    def parse_stream(
        self,
        stream: BinaryIO,
        file_name: str,
        cancel_event: Optional[threading.Event] = None
    ) -> Stats:
        stats = Stats()
        builder = PageRecordBuilder(stats.add_record, root_tag=self.root_tag)
        parser = etree.XMLParser(
            target=builder,
            huge_tree=True,
            resolve_entities=False,
            no_network=True
        )

        try:
            while True:
                if cancel_event is not None and cancel_event.is_set():
                    raise ProcessingCancelled("Processing cancelled", file_name=file_name)
                chunk = self._read_chunk(stream, file_name)
                if not chunk:
                    break
                parser.feed(chunk)
            counters = parser.close()
        except etree.XMLSyntaxError as e:
            raise MalformedXml(f"Not well-formed XML: {e}", file_name=file_name) from e
        except WikiStatsError as e:
            if e.file_name is None:
                e.file_name = file_name
            raise

        self.logger.debug(
            f"Parsed {file_name}: {counters['pages']} pages, "
            f"{counters['emitted']} counted, {counters['dropped']} without title, text or year"
        )
        return stats

    def _read_chunk(self, stream: BinaryIO, file_name: str) -> bytes:
        try:
            return stream.read(self.buffer_size)
        except DECOMPRESSION_ERRORS as e:
            raise CorruptCompressedStream(f"Corrupt compressed data: {e}", file_name=file_name) from e
