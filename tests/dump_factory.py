"""Builders for small synthetic MediaWiki dumps."""
import bz2
import gzip
from pathlib import Path
from typing import Iterable, Optional

NAMESPACE = "http://www.mediawiki.org/xml/export-0.10/"


def page_xml(
    title: Optional[str] = None,
    text: Optional[str] = None,
    size: Optional[str] = None,
    timestamp: Optional[str] = None,
) -> str:
    """One <page> element; fields left as None are omitted."""
    parts = ["  <page>", "    <ns>0</ns>"]
    if title is not None:
        parts.append(f"    <title>{title}</title>")
    parts.append("    <revision>")
    parts.append("      <id>1</id>")
    if timestamp is not None:
        parts.append(f"      <timestamp>{timestamp}</timestamp>")
    if text is not None:
        size_attr = f' bytes="{size}"' if size is not None else ""
        parts.append(f'      <text xml:space="preserve"{size_attr}>{text}</text>')
    parts.append("    </revision>")
    parts.append("  </page>")
    return "\n".join(parts)


def dump_xml(pages: Iterable[str], namespace: Optional[str] = NAMESPACE) -> str:
    xmlns = f' xmlns="{namespace}"' if namespace else ""
    body = "\n".join(pages)
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f'<mediawiki{xmlns} version="0.10" xml:lang="ru">\n'
        "  <siteinfo><sitename>Википедия</sitename></siteinfo>\n"
        f"{body}\n"
        "</mediawiki>\n"
    )


def write_dump(path: Path, xml: str) -> Path:
    data = xml.encode("utf-8")
    if path.suffix == ".bz2":
        path.write_bytes(bz2.compress(data))
    elif path.suffix == ".gz":
        path.write_bytes(gzip.compress(data))
    else:
        path.write_bytes(data)
    return path
