"""Guard runners for repository standards.

``logging_guard`` bans print calls; ``exceptions_guard`` bans bare except and
handlers that neither re-raise, log, nor return. Each exposes
``run(roots: list[str]) -> int``, non-zero on violations.
"""
