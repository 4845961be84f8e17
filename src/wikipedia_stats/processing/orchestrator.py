import logging
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Sequence, Union

from wikipedia_stats.config.settings import PARSER_CONFIG, PROCESSING_CONFIG
from wikipedia_stats.processing.parser.base_parser import BaseParser
from wikipedia_stats.processing.parser.dump_parser import DumpParser
from wikipedia_stats.processing.shared.error_handling import (
    ErrorHandler,
    ProcessingCancelled,
)
from wikipedia_stats.processing.stats import Stats


@dataclass
class ProcessingStats:
    files_processed: int = 0
    files_cancelled: int = 0
    timed_out: bool = False
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None

    def duration(self) -> float:
        return (self.end_time or time.time()) - self.start_time


class StatsOrchestrator:
    """
    Runs the dump parser over many files and merges the results.

    With ``threads`` above one, files go to a pool of ``threads - 1`` workers;
    each worker merges its file's statistics into the shared instance under
    one coarse lock. Any failure aborts the whole run.
    """

    def __init__(
        self,
        threads: int = PROCESSING_CONFIG['threads'],
        buffer_size: int = PARSER_CONFIG['buffer_size'],
        timeout: float = PROCESSING_CONFIG['timeout_seconds'],
        parser: Optional[BaseParser] = None,
        logger: Optional[logging.Logger] = None,
        error_handler: Optional[ErrorHandler] = None
    ):
        self.threads = threads
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self.parser = parser or DumpParser(buffer_size=buffer_size, logger=self.logger)
        self.error_handler = error_handler or ErrorHandler(self.logger)

        self.stats = Stats()
        self.progress = ProcessingStats()
        self._merge_lock = threading.Lock()
        self._cancel_event = threading.Event()

    def process_dump_file(self, file_path: Union[str, Path]) -> Stats:
        """Parse a single archive into its own Stats instance."""
        started = time.time()
        try:
            file_stats = self.parser.parse_file(file_path, self._cancel_event)
        except ProcessingCancelled:
            raise
        except Exception as e:
            self.error_handler.handle(e, ErrorHandler.create_context(
                component="StatsOrchestrator.process_dump_file",
                item_id=str(file_path)
            ))
            raise

        self.logger.info(
            f"Processed {Path(file_path).name} in {time.time() - started:.2f}s "
            f"({len(file_stats.title)} title words, {len(file_stats.text)} text words)"
        )
        return file_stats

    def merge(self, file_stats: Stats) -> bool:
        """Merge one file's statistics into the shared instance; False once cancelled."""
        with self._merge_lock:
            if self._cancel_event.is_set():
                return False
            self.stats.merge(file_stats)
            self.progress.files_processed += 1
            return True

    def _process_and_merge(self, file_path: Union[str, Path]) -> None:
        if not self.merge(self.process_dump_file(file_path)):
            raise ProcessingCancelled("Result discarded after cancellation", file_name=str(file_path))

    def run(self, files: Sequence[Union[str, Path]]) -> Stats:
        """
        Process every file and return the merged statistics.

        Args:
            files: Local archive paths

        Returns:
            A fresh Stats instance holding the sum over all files
        """
        self.stats = Stats()
        self.progress = ProcessingStats()
        self._cancel_event = threading.Event()
        if self.threads <= 1:
            for file_path in files:
                self._process_and_merge(file_path)
        else:
            self._run_parallel(files)

        self.progress.end_time = time.time()
        self.logger.info(
            f"Merged {self.progress.files_processed}/{len(files)} files "
            f"in {self.progress.duration():.2f}s"
        )
        return self.stats

    def _run_parallel(self, files: Sequence[Union[str, Path]]) -> None:
        with ThreadPoolExecutor(max_workers=self.threads - 1, thread_name_prefix="dump-worker") as executor:
            futures = [executor.submit(self._process_and_merge, file_path) for file_path in files]
            done, not_done = wait(futures, timeout=self.timeout, return_when=FIRST_EXCEPTION)

            if not_done:
                self._cancel(not_done)

            failure = self._first_failure(futures, done)
            if failure is not None:
                self._cancel_event.set()
                raise failure

            if not_done:
                self.progress.timed_out = True
                self.logger.warning(
                    f"Timed out after {self.timeout}s with {len(not_done)} of {len(files)} files unfinished; "
                    f"the report covers only merged files"
                )

    def _cancel(self, pending) -> None:
        self._cancel_event.set()
        for future in pending:
            if future.cancel():
                self.progress.files_cancelled += 1

    @staticmethod
    def _first_failure(futures, done) -> Optional[BaseException]:
        """First real error in submission order, ignoring cancellations."""
        for future in futures:
            if future not in done or future.cancelled():
                continue
            error = future.exception()
            if error is not None and not isinstance(error, ProcessingCancelled):
                return error
        return None

    def summary(self) -> Dict[str, int]:
        return {
            'files_processed': self.progress.files_processed,
            'files_cancelled': self.progress.files_cancelled,
            'title_words': len(self.stats.title),
            'text_words': len(self.stats.text),
        }
