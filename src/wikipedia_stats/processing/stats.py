from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional

from wikipedia_stats.processing.parser.page_builder import PageRecord


@dataclass
class Stats:
    """
    Word, size and year frequencies of one file or of the whole run.

    Not thread safe: a per-file instance is owned by a single worker, and
    merges into the shared instance are serialized by the orchestrator.
    """
    title: Counter = field(default_factory=Counter)
    text: Counter = field(default_factory=Counter)
    bytes: Counter = field(default_factory=Counter)
    time: Counter = field(default_factory=Counter)

    def update(
        self,
        title_words: Iterable[str] = (),
        text_words: Iterable[str] = (),
        size_bucket: Optional[int] = None,
        year: int = 0
    ) -> None:
        self.title.update(title_words)
        self.text.update(text_words)
        if size_bucket is not None:
            self.bytes[size_bucket] += 1
        if year != 0:
            self.time[year] += 1

    def add_record(self, record: PageRecord) -> None:
        self.update(record.title_words, record.text_words, record.size_bucket, record.year)

    def merge(self, other: "Stats") -> None:
        """Add every count of ``other`` into this instance, key by key."""
        for name in ('title', 'text', 'bytes', 'time'):
            target = getattr(self, name)
            for key, count in getattr(other, name).items():
                target[key] += count

    def is_empty(self) -> bool:
        return not (self.title or self.text or self.bytes or self.time)
