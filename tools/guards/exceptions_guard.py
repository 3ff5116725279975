from __future__ import annotations

import ast
import sys
from collections.abc import Iterable
from pathlib import Path

LOG_METHODS = frozenset({"debug", "info", "warning", "error", "exception", "critical"})


def iter_python_files(roots: Iterable[str]) -> Iterable[Path]:
    for root in roots:
        base = Path(root)
        if not base.exists():
            continue
        yield from base.rglob("*.py")


def _is_log_call(node: ast.AST) -> bool:
    return (
        isinstance(node, ast.Call)
        and isinstance(node.func, ast.Attribute)
        and node.func.attr in LOG_METHODS
    )


def handler_is_accounted(handler: ast.ExceptHandler) -> bool:
    """True when the handler re-raises, logs, or returns an error value."""
    for node in ast.walk(handler):
        if isinstance(node, (ast.Raise, ast.Return)) or _is_log_call(node):
            return True
    return False


def check_source(text: str, path: Path) -> list[str]:
    tree = ast.parse(text, filename=str(path))
    errors: list[str] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.ExceptHandler):
            if node.type is None:
                errors.append(f"{path}:{node.lineno} bare 'except' is forbidden")
            if not handler_is_accounted(node):
                errors.append(
                    f"{path}:{node.lineno} except must re-raise, log, or return"
                )
    return errors


def run(roots: list[str]) -> int:
    errors: list[str] = []
    for path in iter_python_files(roots):
        text = path.read_text(encoding="utf-8")
        try:
            errors.extend(check_source(text, path))
        except SyntaxError as exc:  # pragma: no cover
            sys.stderr.write(f"{path}: PARSE_ERROR {exc}\n")
            raise
    if errors:
        sys.stderr.write("\n".join(errors) + "\n")
        return 1
    return 0


def main() -> int:
    return run(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())
