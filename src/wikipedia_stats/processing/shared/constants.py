"""
Shared constants across the dump statistics pipeline.
Only for values used across multiple components.
"""

# Tag names of the MediaWiki export format that the page builder tracks
PAGE_TAG = "page"
TITLE_TAG = "title"
REVISION_TAG = "revision"
TEXT_TAG = "text"
TIMESTAMP_TAG = "timestamp"

# Attribute on <text> carrying the declared revision size
SIZE_ATTRIBUTE = "bytes"

# Tracked paths below the document root (the root tag itself is configurable)
TITLE_PATH = (PAGE_TAG, TITLE_TAG)
TEXT_PATH = (PAGE_TAG, REVISION_TAG, TEXT_TAG)
TIMESTAMP_PATH = (PAGE_TAG, REVISION_TAG, TIMESTAMP_TAG)

# Word extraction: lowercase letters of the target alphabet, as a regex class body
CYRILLIC_ALPHABET = "а-яё"
MIN_WORD_LENGTH = 3

# First date-looking fragment of a revision timestamp, e.g. 2021-03-04T10:00:00Z
TIMESTAMP_DATE_PATTERN = r"[0-9]{4}-[0-9]{2}-[0-9]{2}"

# Report layout
HISTOGRAM_MARKER = "="

REPORT_HEADINGS = {
    'title': "Топ-{top_n} слов в заголовках статей:",
    'text': "Топ-{top_n} слов в статьях:",
    'bytes': "Распределение статей по размеру:",
    'time': "Распределение статей по времени:",
    'html_bytes': "Гистограмма распределения статей по размеру:",
    'html_time': "Гистограмма распределения статей по времени:",
    'html_caption': "Статистика архивов",
}

# Suffixes mapped to the decompression wrapper used for them
COMPRESSION_SUFFIXES = {
    ".bz2": "bz2",
    ".gz": "gzip",
}
