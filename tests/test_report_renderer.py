"""
Tests for report ordering, histogram ranges and both output formats.
"""
from collections import Counter
from unittest import mock

import pytest

from wikipedia_stats.processing.shared.error_handling import ReportWriteError
from wikipedia_stats.processing.stats import Stats
from wikipedia_stats.reporting import report_renderer
from wikipedia_stats.reporting.report_renderer import (
    histogram_range,
    percent_bar,
    render_html,
    render_plain,
    top_words,
    write_report,
)


@pytest.fixture
def stats():
    return Stats(
        title=Counter({"бб": 2, "аа": 2, "вв": 5}),
        text=Counter({"слово": 3}),
        bytes=Counter({1: 1, 3: 3}),
        time=Counter({2019: 2, 2021: 2}),
    )


def test_ties_are_broken_by_ascending_word():
    assert top_words(Counter({"бб": 2, "аа": 2})) == [("аа", 2), ("бб", 2)]


def test_top_words_truncates():
    counts = Counter({f"слово{i:03d}": i for i in range(1, 401)})

    top = top_words(counts, 300)

    assert len(top) == 300
    assert top[0] == ("слово400", 400)
    assert top[-1] == ("слово101", 101)


def test_top_words_shorter_than_limit():
    assert top_words(Counter({"один": 1})) == [("один", 1)]


def test_histogram_range():
    assert list(histogram_range({3: 1, 1: 1})) == [1, 2, 3]
    assert list(histogram_range({})) == []


def test_percent_bar_truncates():
    assert percent_bar(1, 3) == "=" * 33
    assert percent_bar(0, 3) == ""
    assert percent_bar(0, 0) == ""


def test_render_plain(stats):
    assert render_plain(stats) == (
        "Топ-300 слов в заголовках статей:\n"
        "5 вв\n"
        "2 аа\n"
        "2 бб\n"
        "\n"
        "Топ-300 слов в статьях:\n"
        "3 слово\n"
        "\n"
        "Распределение статей по размеру:\n"
        "1 1\n"
        "2 0\n"
        "3 3\n"
        "\n"
        "Распределение статей по времени:\n"
        "2019 2\n"
        "2020 0\n"
        "2021 2\n"
    )


def test_render_plain_empty_stats():
    assert render_plain(Stats()) == (
        "Топ-300 слов в заголовках статей:\n"
        "\n"
        "Топ-300 слов в статьях:\n"
        "\n"
        "Распределение статей по размеру:\n"
        "\n"
        "Распределение статей по времени:\n"
    )


def test_render_html(stats):
    html = render_html(stats)

    assert html.startswith('<h1 style="text-align: center;">Статистика архивов</h1>\n')
    assert "<p>Топ-300 слов в заголовках статей:<br />5 вв\n<br />2 аа\n<br />2 бб\n</p>\n" in html
    assert (
        "<p>Гистограмма распределения статей по размеру:"
        "<br />1: " + "=" * 25 + "&gt;<br />"
        "<br />2: &gt;<br />"
        "<br />3: " + "=" * 75 + "&gt;<br /></p>\n"
    ) in html
    assert "<br />2020: &gt;<br />" in html
    assert "<br />2019: " + "=" * 50 + "&gt;<br />" in html


def test_write_report_is_utf8(tmp_path, stats):
    target = write_report(stats, tmp_path / "statistics.txt")

    assert target.read_text(encoding="utf-8") == render_plain(stats)
    assert [p.name for p in tmp_path.iterdir()] == ["statistics.txt"]


def test_write_report_html(tmp_path, stats):
    target = write_report(stats, tmp_path / "statistics.html", html=True)

    assert target.read_text(encoding="utf-8") == render_html(stats)


def test_failed_render_leaves_destination_untouched(tmp_path, stats):
    target = tmp_path / "statistics.txt"
    target.write_text("previous report", encoding="utf-8")

    with mock.patch.object(report_renderer, "render_report", side_effect=RuntimeError("boom")):
        with pytest.raises(RuntimeError):
            write_report(stats, target)

    assert target.read_text(encoding="utf-8") == "previous report"
    assert [p.name for p in tmp_path.iterdir()] == ["statistics.txt"]


def test_missing_output_directory_raises_report_error(tmp_path, stats):
    with pytest.raises(ReportWriteError) as excinfo:
        write_report(stats, tmp_path / "missing" / "statistics.txt")

    assert "statistics.txt" in str(excinfo.value)


def test_failed_replace_removes_temp_file(tmp_path, stats):
    target = tmp_path / "statistics.txt"

    with mock.patch.object(report_renderer.os, "replace", side_effect=PermissionError("read-only")):
        with pytest.raises(ReportWriteError):
            write_report(stats, target)

    assert list(tmp_path.iterdir()) == []
