"""Pytest configuration and shared fixtures."""
from pathlib import Path
from typing import Optional

import pytest

from tests.dump_factory import NAMESPACE, dump_xml, write_dump


@pytest.fixture
def make_dump(tmp_path):
    """Factory writing a dump of the given pages into tmp_path; the suffix picks the compression."""
    def _make(name: str, *pages: str, namespace: Optional[str] = NAMESPACE) -> Path:
        return write_dump(tmp_path / name, dump_xml(pages, namespace=namespace))
    return _make
