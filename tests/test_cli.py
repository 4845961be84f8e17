"""
Tests for the command line entry point.
"""
from unittest import mock

import pytest

from tests.dump_factory import page_xml
from wikipedia_stats import cli

TS = "2018-02-03T04:05:06Z"


@pytest.fixture
def log_dir(tmp_path):
    return str(tmp_path / "logs")


def test_main_writes_plain_report(make_dump, tmp_path, log_dir):
    first = make_dump("a.xml.bz2", page_xml("Снег", "Белый снег", "12", TS))
    second = make_dump("b.xml.bz2", page_xml("Лёд", "Холодный лёд", "1200", TS))
    output = tmp_path / "statistics.txt"

    code = cli.main([
        "--inputs", f"{first},{second}",
        "--output", str(output),
        "--threads", "2",
        "--log-dir", log_dir,
    ])

    assert code == 0
    report = output.read_text(encoding="utf-8")
    assert "1 лёд\n1 снег\n" in report
    assert "Распределение статей по размеру:\n1 1\n2 0\n3 1\n" in report
    assert report.endswith("Распределение статей по времени:\n2018 2\n")


def test_main_html_flag(make_dump, tmp_path, log_dir):
    dump = make_dump("a.xml.bz2", page_xml("Снег", "Белый снег", "12", TS))
    output = tmp_path / "statistics.html"

    assert cli.main(["--inputs", str(dump), "--output", str(output), "--html", "--log-dir", log_dir]) == 0
    assert output.read_text(encoding="utf-8").startswith("<h1")


def test_main_fails_without_partial_report(make_dump, tmp_path, log_dir):
    good = make_dump("a.xml.bz2", page_xml("Снег", "Белый снег", "12", TS))
    bad = make_dump("b.xml.bz2", page_xml("Лёд", "Холодный лёд", None, TS))
    output = tmp_path / "statistics.txt"

    code = cli.main(["--inputs", f"{good},{bad}", "--output", str(output), "--log-dir", log_dir])

    assert code == 1
    assert not output.exists()


def test_main_requires_inputs_or_date(tmp_path, log_dir):
    assert cli.main(["--output", str(tmp_path / "out.txt"), "--log-dir", log_dir]) == 1


def test_date_mode_downloads_and_renders_html(make_dump, tmp_path, log_dir, monkeypatch):
    dump = make_dump("ruwiki-20211101-pages-meta-current1.xml-p1p100.bz2", page_xml("Снег", "Белый снег", "12", TS))
    monkeypatch.chdir(tmp_path)

    with mock.patch.object(cli, "DumpFetcher") as fetcher_cls:
        fetcher_cls.return_value.fetch.return_value = [dump]
        code = cli.main(["--date", "20211101", "--threads", "1", "--log-dir", log_dir])

    assert code == 0
    fetcher_cls.return_value.fetch.assert_called_once_with("20211101")
    assert (tmp_path / "statistics.html").read_text(encoding="utf-8").startswith("<h1")


def test_main_reports_unwritable_output(make_dump, tmp_path, log_dir, caplog):
    dump = make_dump("a.xml.bz2", page_xml("Снег", "Белый снег", "12", TS))
    output = tmp_path / "missing" / "statistics.txt"

    code = cli.main(["--inputs", str(dump), "--output", str(output), "--log-dir", log_dir])

    assert code == 1
    assert "Error! ReportWriteError" in caplog.text
    assert not output.parent.exists()


@pytest.mark.parametrize("debug", [False, True])
def test_debug_flag_adds_traceback_to_failure_log(debug, make_dump, log_dir, caplog):
    bad = make_dump("b.xml.bz2", page_xml("Лёд", "Холодный лёд", None, TS))
    argv = ["--inputs", str(bad), "--threads", "1", "--log-dir", log_dir]

    assert cli.main(argv + (["--debug"] if debug else [])) == 1

    failures = [r for r in caplog.records if r.getMessage().startswith("Error occurred")]
    assert len(failures) == 1
    assert (failures[0].exc_info is not None) == debug


def test_main_small_buffer_reads_whole_dump(make_dump, tmp_path, log_dir):
    dump = make_dump("a.xml.bz2", page_xml("Снег", "Белый снег", "12", TS))
    output = tmp_path / "statistics.txt"

    code = cli.main(["--inputs", str(dump), "--output", str(output), "--buffer-size", "1", "--log-dir", log_dir])

    assert code == 0
    assert "1 снег\n" in output.read_text(encoding="utf-8")


@pytest.mark.parametrize("argv", [
    ["--threads", "0"],
    ["--threads", "33"],
    ["--threads", "many"],
    ["--inputs", "does-not-exist.bz2"],
    ["--date", "2021-11-01"],
    ["--buffer-size", "0"],
    ["--buffer-size", "-1"],
])
def test_invalid_arguments_exit(argv, log_dir):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv + ["--log-dir", log_dir])

    assert excinfo.value.code == 2
