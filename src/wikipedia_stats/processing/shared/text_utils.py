"""Word extraction and size bucketing used by the page builder."""

import re
from typing import List, Optional, Pattern

from wikipedia_stats.processing.shared.constants import CYRILLIC_ALPHABET, MIN_WORD_LENGTH


def build_word_pattern(alphabet: str = CYRILLIC_ALPHABET, min_length: int = MIN_WORD_LENGTH) -> Pattern:
    """
    Compile the word pattern for an alphabet.

    Args:
        alphabet: Body of a regex character class with lowercase letters, e.g. ``a-z``
        min_length: Minimum number of consecutive letters forming a word

    Returns:
        Compiled pattern matching runs of at least ``min_length`` letters
    """
    return re.compile(f"[{alphabet}]{{{min_length},}}")


WORD_PATTERN = build_word_pattern()


def extract_words(text: str, pattern: Pattern = WORD_PATTERN) -> List[str]:
    """Lowercase ``text`` and return every qualifying word in order."""
    # str.lower() uses the Unicode case tables, not the process locale
    return pattern.findall(text.lower())


def size_bucket(size: Optional[int]) -> Optional[int]:
    """Histogram bucket of a byte count: its number of decimal digits minus one."""
    if size is None:
        return None

    bucket = 0
    threshold = 10
    while size >= threshold:
        threshold *= 10
        bucket += 1
    return bucket
