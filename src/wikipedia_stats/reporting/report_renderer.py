"""
Top-N word lists and size/year histograms rendered as plain text or HTML.
"""

import heapq
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Mapping, Tuple, Union

from wikipedia_stats.config.settings import REPORT_CONFIG
from wikipedia_stats.processing.shared.constants import HISTOGRAM_MARKER, REPORT_HEADINGS
from wikipedia_stats.processing.shared.error_handling import ReportWriteError
from wikipedia_stats.processing.stats import Stats

logger = logging.getLogger(__name__)


def top_words(counts: Mapping[str, int], top_n: int = REPORT_CONFIG['top_n']) -> List[Tuple[str, int]]:
    """Most frequent words, count descending then word ascending."""
    return heapq.nsmallest(top_n, counts.items(), key=lambda item: (-item[1], item[0]))


def histogram_range(counts: Mapping[int, int]) -> range:
    """Every key between the smallest and largest present key; empty for an empty map."""
    if not counts:
        return range(0)
    return range(min(counts), max(counts) + 1)


def percent_bar(count: int, total: int) -> str:
    if total <= 0:
        return ""
    return HISTOGRAM_MARKER * (count * 100 // total)


def render_plain(stats: Stats, top_n: int = REPORT_CONFIG['top_n']) -> str:
    lines = [REPORT_HEADINGS['title'].format(top_n=top_n)]
    lines.extend(f"{count} {word}" for word, count in top_words(stats.title, top_n))
    lines.append("")

    lines.append(REPORT_HEADINGS['text'].format(top_n=top_n))
    lines.extend(f"{count} {word}" for word, count in top_words(stats.text, top_n))
    lines.append("")

    lines.append(REPORT_HEADINGS['bytes'])
    lines.extend(f"{bucket} {stats.bytes.get(bucket, 0)}" for bucket in histogram_range(stats.bytes))
    lines.append("")

    lines.append(REPORT_HEADINGS['time'])
    lines.extend(f"{year} {stats.time.get(year, 0)}" for year in histogram_range(stats.time))
    return "\n".join(lines) + "\n"


def _html_word_section(heading: str, words: List[Tuple[str, int]]) -> str:
    rows = "".join(f"<br />{count} {word}\n" for word, count in words)
    return f"<p>{heading}{rows}</p>\n"


def _html_histogram_section(heading: str, counts: Mapping[int, int]) -> str:
    total = sum(counts.values())
    rows = "".join(
        f"<br />{key}: {percent_bar(counts.get(key, 0), total)}&gt;<br />"
        for key in histogram_range(counts)
    )
    return f"<p>{heading}{rows}</p>\n"


def render_html(stats: Stats, top_n: int = REPORT_CONFIG['top_n']) -> str:
    return "".join([
        f"<h1 style=\"text-align: center;\">{REPORT_HEADINGS['html_caption']}</h1>\n",
        _html_word_section(REPORT_HEADINGS['title'].format(top_n=top_n), top_words(stats.title, top_n)),
        _html_word_section(REPORT_HEADINGS['text'].format(top_n=top_n), top_words(stats.text, top_n)),
        _html_histogram_section(REPORT_HEADINGS['html_bytes'], stats.bytes),
        _html_histogram_section(REPORT_HEADINGS['html_time'], stats.time),
    ])


def render_report(stats: Stats, html: bool = False, top_n: int = REPORT_CONFIG['top_n']) -> str:
    return render_html(stats, top_n) if html else render_plain(stats, top_n)


def _discard(temp_name: str) -> None:
    if os.path.exists(temp_name):
        os.unlink(temp_name)



def write_report(
    stats: Stats,
    output_path: Union[str, Path],
    html: bool = False,
    top_n: int = REPORT_CONFIG['top_n']
) -> Path:
    """
    Render the report and write it to ``output_path`` as UTF-8.

    The whole report is rendered first and moved into place with one
    ``os.replace``, so the destination is either complete or untouched.

    Args:
        stats: Final merged statistics
        output_path: Destination file
        html: Render HTML instead of plain text
        top_n: Number of words listed per section

    Returns:
        Path of the written report
    """
    output_path = Path(output_path)
    content = render_report(stats, html=html, top_n=top_n)

    try:
        fd, temp_name = tempfile.mkstemp(prefix=f".{output_path.name}.", suffix=".tmp", dir=output_path.parent)
    except OSError as e:
        raise ReportWriteError(f"Cannot create report: {e}", file_name=str(output_path)) from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as out:
            out.write(content)
        os.replace(temp_name, output_path)
    except OSError as e:
        _discard(temp_name)
        raise ReportWriteError(f"Cannot write report: {e}", file_name=str(output_path)) from e
    except BaseException:
        _discard(temp_name)
        raise

    logger.info(f"Wrote {'HTML' if html else 'plain text'} report to {output_path}")
    return output_path
