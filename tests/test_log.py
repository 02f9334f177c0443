import re

import pytest

from reactor_http.log import Logger, PrintMethod

LINE = re.compile(
    r"^\[(?P<level>\w+)\]\[thread: 0x[0-9a-f]+\]\[\d\d:\d\d:\d\d\] (?P<msg>.*)\n$"
)


@pytest.fixture
def log():
    return Logger()


def test_screen_line_format(log, capsys):
    log.debug("value %d and %s", 5, "text")
    out = capsys.readouterr().out
    match = LINE.match(out)
    assert match is not None
    assert match.group("level") == "Debug"
    assert match.group("msg") == "value 5 and text"


def test_message_without_args_is_literal(log, capsys):
    log.info("100% done")
    out = capsys.readouterr().out
    assert out.endswith(" 100% done\n")


@pytest.mark.parametrize(
    "level, shown",
    [
        ("debug", ["Debug", "Info", "Warning", "Error", "Fatal"]),
        ("info", ["Info", "Warning", "Error", "Fatal"]),
        ("warning", ["Warning", "Error", "Fatal"]),
        ("error", ["Error", "Fatal"]),
        ("fatal", ["Fatal"]),
    ],
)
def test_level_filtering(log, capsys, level, shown):
    log.set_log_level(level)
    log.debug("m")
    log.info("m")
    log.warning("m")
    log.error("m")
    log.fatal("m")
    lines = capsys.readouterr().out.splitlines(keepends=True)
    assert [LINE.match(line).group("level") for line in lines] == shown


def test_unknown_level_means_debug(log, capsys):
    log.set_log_level("fatal")
    log.set_log_level("nonsense")
    log.debug("visible")
    assert "visible" in capsys.readouterr().out


def test_one_file_output(log, tmp_path, capsys):
    log.directory = tmp_path
    log.set_print_method(PrintMethod.ONEFILE)
    log.error("first")
    log.warning("second")
    files = list(tmp_path.iterdir())
    assert len(files) == 1
    assert files[0].name.endswith("_log.txt")
    content = files[0].read_text(encoding="utf-8")
    assert "first" in content and "second" in content
    assert capsys.readouterr().out == ""


def test_class_file_output_splits_by_level(log, tmp_path):
    log.directory = tmp_path
    log.set_log_file("app")
    log.set_print_method(PrintMethod.CLASSFILE)
    log.error("bad")
    log.info("good")
    names = sorted(path.name for path in tmp_path.iterdir())
    assert len(names) == 2
    assert names[0].endswith("_app.Error")
    assert names[1].endswith("_app.Info")


def test_missing_directory_is_silent(log, tmp_path):
    log.directory = tmp_path / "absent"
    log.set_print_method(PrintMethod.ONEFILE)
    log.fatal("lost")
    assert not (tmp_path / "absent").exists()


def test_print_method_from_value(log):
    log.set_print_method("classfile")
    assert log.print_method is PrintMethod.CLASSFILE