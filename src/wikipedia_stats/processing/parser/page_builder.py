"""
Tag-path state machine turning parse events into page records.

The builder is an lxml parser target: lxml calls ``start``, ``data`` and
``end`` while it tokenizes, so no element tree is ever built and memory
stays constant however large the dump is.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from wikipedia_stats.processing.shared.constants import (
    PAGE_TAG,
    SIZE_ATTRIBUTE,
    TEXT_PATH,
    TIMESTAMP_PATH,
    TITLE_PATH,
)
from wikipedia_stats.processing.shared.error_handling import MissingSizeAttribute
from wikipedia_stats.processing.shared.text_utils import extract_words, size_bucket
from wikipedia_stats.wiki_utils.datetime_utils import extract_year


@dataclass(frozen=True)
class PageRecord:
    title_words: List[str]
    text_words: List[str]
    size_bucket: Optional[int]
    # 0 means the page had no timestamp
    year: int


class _PathNode:
    """One tag of the tracked-path trie."""

    __slots__ = ('children', 'role')

    def __init__(self, role: Optional[str] = None):
        self.children: Dict[str, "_PathNode"] = {}
        self.role = role

    def child(self, name: str, role: Optional[str] = None) -> "_PathNode":
        node = self.children.get(name)
        if node is None:
            node = self.children[name] = _PathNode(role)
        elif role is not None:
            node.role = role
        return node


# Node roles
PAGE = 'page'
TITLE = 'title'
TEXT = 'text'
TIMESTAMP = 'timestamp'

CAPTURED_ROLES = frozenset((TITLE, TEXT, TIMESTAMP))


def build_path_trie(root_tag: str) -> _PathNode:
    """Trie over the tracked paths; the returned node stands for the document itself."""
    document = _PathNode()
    root = document.child(root_tag)
    root.child(PAGE_TAG, PAGE)
    for path, role in ((TITLE_PATH, TITLE), (TEXT_PATH, TEXT), (TIMESTAMP_PATH, TIMESTAMP)):
        node = root
        for depth, name in enumerate(path):
            node = node.child(name, role if depth == len(path) - 1 else None)
    return document


def local_name(tag: str) -> str:
    """Strip an lxml ``{namespace}`` prefix."""
    if tag[:1] == '{':
        return tag.rpartition('}')[2]
    return tag


class PageRecordBuilder:
    """
    Parser target that assembles one ``PageRecord`` per ``page`` element.

    The stack holds one trie node per open tag, or ``None`` once the path
    has left the tracked paths, so matching costs a dict lookup per tag.
    """

    def __init__(
        self,
        sink: Callable[[PageRecord], None],
        root_tag: str = "mediawiki"
    ):
        self.sink = sink
        self._stack: List[Optional[_PathNode]] = [build_path_trie(root_tag)]
        self._buffer: List[str] = []

        self._title: List[str] = []
        self._text: List[str] = []
        self._year = 0
        self._size: Optional[int] = None

        self.counters = {'pages': 0, 'emitted': 0, 'dropped': 0}

    @property
    def depth(self) -> int:
        return len(self._stack) - 1

    def _role(self) -> Optional[str]:
        node = self._stack[-1]
        return node.role if node is not None else None

    def start(self, tag: str, attrib) -> None:
        parent = self._stack[-1]
        node = parent.children.get(local_name(tag)) if parent is not None else None
        self._stack.append(node)

        role = node.role if node is not None else None
        if role in CAPTURED_ROLES:
            self._buffer = []
        if role == TEXT:
            self._size = self._read_size(attrib)

    def data(self, text: str) -> None:
        if self._role() in CAPTURED_ROLES:
            self._buffer.append(text)

    def end(self, tag: str) -> None:
        role = self._role()
        if role == TITLE:
            self._title = extract_words(''.join(self._buffer))
        elif role == TEXT:
            self._text = extract_words(''.join(self._buffer))
        elif role == TIMESTAMP:
            self._year = extract_year(''.join(self._buffer))
        elif role == PAGE:
            self._close_page()
        self._stack.pop()

    def close(self) -> Dict[str, int]:
        return self.counters

    def _read_size(self, attrib) -> int:
        raw = None
        for name, value in attrib.items():
            if local_name(name) == SIZE_ATTRIBUTE:
                raw = value
                break
        if raw is None:
            raise MissingSizeAttribute(f"<text> element without a '{SIZE_ATTRIBUTE}' attribute")
        try:
            return int(raw)
        except ValueError:
            raise MissingSizeAttribute(
                f"<text> element with a non-integer '{SIZE_ATTRIBUTE}' attribute: {raw!r}"
            ) from None

    def _close_page(self) -> None:
        self.counters['pages'] += 1
        if self._title and self._text and self._year != 0:
            self.sink(PageRecord(self._title, self._text, size_bucket(self._size), self._year))
            self.counters['emitted'] += 1
        else:
            self.counters['dropped'] += 1

        self._title = []
        self._text = []
        self._year = 0
        self._size = None
