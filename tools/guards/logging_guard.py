from __future__ import annotations

import ast
import sys
from pathlib import Path

from tools.guards.exceptions_guard import iter_python_files


def find_print_calls(text: str, path: Path) -> list[str]:
    tree = ast.parse(text, filename=str(path))
    return [
        f"{path}:{n.lineno} use logger; 'print' is forbidden"
        for n in ast.walk(tree)
        if (
            isinstance(n, ast.Call)
            and isinstance(n.func, ast.Name)
            and n.func.id == "print"
        )
    ]


def run(roots: list[str]) -> int:
    errors: list[str] = []
    for path in iter_python_files(roots):
        errors.extend(find_print_calls(path.read_text(encoding="utf-8"), path))
    if errors:
        sys.stderr.write("\n".join(errors) + "\n")
        return 1
    return 0


def main() -> int:
    return run(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())
