#!/usr/bin/env python3
import argparse
import os
import sys
import time
from pathlib import Path
from typing import List, Optional

from icecream import ic

from wikipedia_stats.config.settings import LOG_DIR, PARSER_CONFIG, PROCESSING_CONFIG, REPORT_CONFIG
from wikipedia_stats.processing.orchestrator import StatsOrchestrator
from wikipedia_stats.processing.shared.error_handling import (
    ErrorHandler,
    UnreadableFile,
    WikiStatsError,
    error_kind,
)
from wikipedia_stats.reporting.report_renderer import write_report
from wikipedia_stats.wiki_io.dump_fetcher import DumpFetcher
from wikipedia_stats.wiki_utils.datetime_utils import is_dump_date
from wikipedia_stats.wiki_utils.logging_utils import ApplicationLogger


def _input_files(value: str) -> List[Path]:
    files = [Path(name) for name in value.split(",") if name]
    if not files or not all(f.is_file() and os.access(f, os.R_OK) for f in files):
        raise argparse.ArgumentTypeError("File does not exist or cannot be read")
    return files


def _thread_count(value: str) -> int:
    low, high = PROCESSING_CONFIG['min_threads'], PROCESSING_CONFIG['max_threads']
    try:
        threads = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if not low <= threads <= high:
        raise argparse.ArgumentTypeError(f"Number of threads must be in {low}..{high}")
    return threads


def _buffer_size(value: str) -> int:
    try:
        size = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if size < 1:
        raise argparse.ArgumentTypeError("Buffer size must be a positive number of bytes")
    return size


def _dump_date(value: str) -> str:
    if not is_dump_date(value):
        raise argparse.ArgumentTypeError("Dump date must look like YYYYMMDD")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wiki-stats",
        description="Word, size and year statistics of MediaWiki XML dumps"
    )
    parser.add_argument('--inputs', type=_input_files,
                        help='Path(s) to bzip2 archived XML file(s) with WikiMedia dump. Comma separated.')
    parser.add_argument('--output', default=REPORT_CONFIG['output'],
                        help='Report output file')
    parser.add_argument('--threads', type=_thread_count, default=PROCESSING_CONFIG['threads'],
                        help='Number of threads')
    parser.add_argument('--date', type=_dump_date,
                        help='Date of dumps to download when no inputs are given (YYYYMMDD)')
    parser.add_argument('--html', action='store_true',
                        help='Render the report as HTML')
    parser.add_argument('--buffer-size', type=_buffer_size, default=PARSER_CONFIG['buffer_size'],
                        help='Read buffer size in bytes')
    parser.add_argument('--log-dir', default=LOG_DIR,
                        help='Directory for the rotating log file')
    parser.add_argument('--debug', action='store_true',
                        help='Debug logging and tracing')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    app_logger = ApplicationLogger(log_dir=Path(args.log_dir), debug=args.debug)
    logger = app_logger.get_logger()
    if args.debug:
        ic.enable()
    else:
        ic.disable()

    try:
        output, html = args.output, args.html
        if args.inputs:
            files = args.inputs
        elif args.date:
            files = DumpFetcher(logger=app_logger.get_logger("fetcher")).fetch(args.date)
            output, html = REPORT_CONFIG['html_output'], True
        else:
            raise UnreadableFile("File does not exist")
        ic(files, output, html, args.threads)

        started = time.monotonic()
        orchestrator_logger = app_logger.get_logger("orchestrator")
        orchestrator = StatsOrchestrator(
            threads=args.threads,
            buffer_size=args.buffer_size,
            logger=orchestrator_logger,
            error_handler=ErrorHandler(orchestrator_logger, debug=args.debug)
        )
        stats = orchestrator.run(files)
        logger.info(f"Time: {int((time.monotonic() - started) * 1000)} ms")
        ic(orchestrator.summary())

        write_report(stats, output, html=html)
    except WikiStatsError as e:
        logger.error(f"Error! {error_kind(e)}: {e}")
        return 1
    finally:
        app_logger.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
