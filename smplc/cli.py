"""Command-line driver: compile a source file to C and build it with gcc."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Sequence

from smplc.analyzer import SemanticAnalyzer
from smplc.codegen import CodeGenerator
from smplc.errors import CompilerError, report_error
from smplc.lexer import tokenize
from smplc.parser import parse

GENERATED_C_PATH = Path("../c_code/generated.c")
DEFAULT_OUTPUT = "exe"


def read_source(path: str | Path) -> str:
    """Return the file's text, or an empty string if it cannot be opened."""
    try:
        return Path(path).read_text()
    except OSError:
        print("Could not open file", file=sys.stderr)
        return ""


def generate_c(source: str, output_path: str | Path = GENERATED_C_PATH) -> bool:
    """Compile ``source`` to C at ``output_path``; False if analysis found errors."""
    program = parse(tokenize(source))
    analyzer = SemanticAnalyzer(program)
    if analyzer.analyze():
        return False
    CodeGenerator(program, analyzer).write(output_path)
    return True


def compile_c_output(filename: str | Path, output_name: str = "a.out") -> bool:
    """Build ``filename`` with gcc into ``output_name``; return whether it worked."""
    try:
        result = subprocess.run(["gcc", str(filename), "-o", output_name], check=False)
        ok = result.returncode == 0
    except OSError:
        ok = False
    if ok:
        print(f"Compiled successfully to: {output_name}")
    else:
        print("Compilation failed.", file=sys.stderr)
    return ok


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("Usage: smplc <source> <optional-output>", file=sys.stderr)
        return 1

    source = read_source(args[0])
    try:
        generate_c(source, GENERATED_C_PATH)
    except CompilerError as err:
        report_error(err.line_number, err.message)
        return 1

    output = args[1] if len(args) > 1 else DEFAULT_OUTPUT
    compile_c_output(GENERATED_C_PATH, output)
    return 0


if __name__ == "__main__":
    sys.exit(main())