"""Repository guard checks.

- No use of print; output goes through logging
- No bare except; handlers re-raise, log, or return an error value

Run with ``python -m tools.guard``; the test suite runs them too.
"""
