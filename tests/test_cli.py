import subprocess
from unittest import mock

from smplc.cli import compile_c_output, generate_c, main, read_source
from smplc.codegen import HEADER

PROGRAM = "defn main() { let x: i32 = 5; print(x); }"


def _completed(code):
    return subprocess.CompletedProcess(args=[], returncode=code)


def test_read_source_round_trip(tmp_path):
    path = tmp_path / "prog.smpl"
    path.write_text(PROGRAM)
    assert read_source(path) == PROGRAM


def test_read_source_missing_file(tmp_path, capsys):
    assert read_source(tmp_path / "missing.smpl") == ""
    assert "Could not open file" in capsys.readouterr().err


def test_generate_c_writes_file(tmp_path):
    out = tmp_path / "gen" / "generated.c"
    assert generate_c(PROGRAM, out) is True
    text = out.read_text()
    assert text.startswith(HEADER)
    assert "int main()" in text


def test_generate_c_with_errors_writes_nothing(tmp_path, capsys):
    out = tmp_path / "generated.c"
    assert generate_c("defn main() { print(y); }", out) is False
    assert not out.exists()
    assert "y is not defined" in capsys.readouterr().out


def test_compile_success(capsys):
    with mock.patch("smplc.cli.subprocess.run", return_value=_completed(0)) as run:
        assert compile_c_output("file.c", "prog") is True
    assert run.call_args.args[0] == ["gcc", "file.c", "-o", "prog"]
    assert "Compiled successfully to: prog" in capsys.readouterr().out


def test_compile_default_output_name(capsys):
    with mock.patch("smplc.cli.subprocess.run", return_value=_completed(0)) as run:
        result = compile_c_output("file.c")
    assert result is True
    assert run.call_args.args[0] == ["gcc", "file.c", "-o", "a.out"]
    assert "Compiled successfully to: a.out" in capsys.readouterr().out


def test_compile_failure(capsys):
    with mock.patch("smplc.cli.subprocess.run", return_value=_completed(1)):
        assert compile_c_output("file.c", "prog") is False
    assert "Compilation failed." in capsys.readouterr().err


def test_compile_without_gcc(capsys):
    with mock.patch("smplc.cli.subprocess.run", side_effect=FileNotFoundError("gcc")):
        assert compile_c_output("file.c", "prog") is False
    assert "Compilation failed." in capsys.readouterr().err


def test_main_without_arguments(capsys):
    assert main([]) == 1
    assert "Usage:" in capsys.readouterr().err


def test_main_compiles_to_named_output(tmp_path, monkeypatch):
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    src = work / "prog.smpl"
    src.write_text(PROGRAM)
    with mock.patch("smplc.cli.subprocess.run", return_value=_completed(0)) as run:
        assert main([str(src), "prog"]) == 0
    generated = tmp_path / "c_code" / "generated.c"
    assert generated.read_text().startswith(HEADER)
    assert run.call_args.args[0][-1] == "prog"


def test_main_default_output(tmp_path, monkeypatch):
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    src = work / "prog.smpl"
    src.write_text(PROGRAM)
    with mock.patch("smplc.cli.subprocess.run", return_value=_completed(0)) as run:
        assert main([str(src)]) == 0
    assert run.call_args.args[0][-1] == "exe"


def test_main_lexical_error(tmp_path, monkeypatch, capsys):
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    src = work / "bad.smpl"
    src.write_text("let x: i32 = 5 @;")
    with mock.patch("smplc.cli.subprocess.run", return_value=_completed(0)) as run:
        assert main([str(src)]) == 1
    assert run.call_count == 0
    assert "Unexpected character: @" in capsys.readouterr().out