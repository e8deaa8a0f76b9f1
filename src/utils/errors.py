"""
Structured logging helpers for codec errors and successes.

The :mod:`src.utils.errors` module centralizes the writing of log entries for
both failed and successful codec operations.  Each entry is printed and, when
a report directory is configured, appended to a JSON Lines file so that the
information can be reviewed or parsed after a run.

The :class:`ErrorReporter` is handed to the serializer instead of being looked
up globally.  Anything with the same ``report_error`` signature can take its
place (tests use it to collect entries in memory).

The ``ERRORS`` dictionary maps error or event codes to human readable
messages.  Codes not present in the dictionary fall back to the code itself.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

# Mapping of event codes used by the codec to descriptive messages.
# The keys include both error and success codes as the same lookup is used by
# :meth:`ErrorReporter.report_error` and :meth:`ErrorReporter.report_ok`.
ERRORS: Dict[str, str] = {
    "COMMENT_APPEND": "Error adding comment",
    "DATE_PARSE": "Failed to parse date so returning current date/time",
    "DECODE_FAILED": "Stored post document is unreadable",
    "ENCODED": "Post encoded successfully",
    "DECODED": "Post decoded successfully",
}


class ErrorReporter:
    """Print and persist error/success events.

    Parameters
    ----------
    report_dir:
        Directory holding ``errors.jsonl`` and ``success.jsonl``.  When
        ``None`` entries are only printed.
    """

    def __init__(self, report_dir: Optional[str] = None) -> None:
        self.report_dir = report_dir

    @property
    def error_log(self) -> Optional[str]:
        if not self.report_dir:
            return None
        return os.path.join(self.report_dir, "errors.jsonl")

    @property
    def ok_log(self) -> Optional[str]:
        if not self.report_dir:
            return None
        return os.path.join(self.report_dir, "success.jsonl")

    def _write_jsonl(self, path: Optional[str], data: Dict[str, Any]) -> None:
        """Append ``data`` as a JSON object followed by a newline to ``path``."""
        if path is None:
            return
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, default=str)
            f.write("\n")

    def report_error(self, code: str, context: Dict[str, Any], exc: Optional[Exception] = None) -> None:
        """Log an error event.

        Parameters
        ----------
        code:
            A key identifying the type of error.  If ``code`` is present in
            :data:`ERRORS` its value will be used as the message.
        context:
            Identifying details (post id, field name, offending value...)
            merged into the log entry.
        exc:
            Optional exception instance that triggered the error.  Its type
            and string representation are included in the log entry.
        """
        message = ERRORS.get(code, code)
        entry: Dict[str, Any] = {"code": code, "message": message}
        entry.update(context)
        if exc is not None:
            entry["error"] = f"{type(exc).__name__}: {exc}"
        detail = ", ".join(f"{k}={v}" for k, v in context.items())
        print(f"[ERROR] {message} - {detail}")
        self._write_jsonl(self.error_log, entry)

    def report_ok(self, code: str, context: Dict[str, Any], extra: Optional[Dict[str, Any]] = None) -> None:
        """Log a successful event; ``extra`` is merged into the entry."""
        message = ERRORS.get(code, code)
        entry: Dict[str, Any] = {"code": code, "message": message}
        entry.update(context)
        if extra:
            entry.update(extra)
        print(f"[OK] {message} - {context.get('id', '')}")
        self._write_jsonl(self.ok_log, entry)
