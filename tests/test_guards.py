from __future__ import annotations

from pathlib import Path

import pytest

from tools import guard
from tools.guards import exceptions_guard, logging_guard

REPO_ROOT = Path(__file__).resolve().parents[1]


def test_logging_guard_flags_print(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "bad.py").write_text("print('rows sent')\n", encoding="utf-8")

    rc = logging_guard.run([str(tmp_path)])

    assert rc == 1
    assert "'print' is forbidden" in capsys.readouterr().err


def test_exceptions_guard_flags_bare_and_silent_handlers(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "bad.py").write_text(
        "try:\n    x = 1\nexcept:\n    pass\n", encoding="utf-8"
    )

    rc = exceptions_guard.run([str(tmp_path)])

    err = capsys.readouterr().err
    assert rc == 1
    assert "bare 'except' is forbidden" in err
    assert "except must re-raise, log, or return" in err


@pytest.mark.parametrize(
    "body",
    [
        "    raise\n",
        "    logger.error('failed: %s', exc)\n",
        "    return None\n",
    ],
)
def test_exceptions_guard_accepts_accounted_handlers(tmp_path: Path, body: str) -> None:
    src = (
        "def f(logger):\n"
        "    try:\n"
        "        return 1\n"
        "    except ValueError as exc:\n"
        + "    " + body
    )
    (tmp_path / "ok.py").write_text(src, encoding="utf-8")

    assert exceptions_guard.run([str(tmp_path)]) == 0


def test_repository_passes_guards(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(REPO_ROOT)
    assert guard.main() == 0
