"""Thin readers that obtain the raw statement text.

The statement is read either from a local file or with a single
non-streaming HTTP GET. There are no retries or caching here; callers hand
the returned supplier to :meth:`salary_ledger.ledger.LedgerStore.load`, which
decides what a failure means for the current state.
"""

from __future__ import annotations

import http.client
import os
import urllib.error
import urllib.request
from collections.abc import Callable
from pathlib import Path

from .logging_setup import get_logger

_logger = get_logger("salary_ledger.source")

DEFAULT_TIMEOUT = 30.0


class StatementSourceError(RuntimeError):
    """The statement text could not be obtained."""


def read_statement_file(path: str | os.PathLike[str], *, encoding: str = "utf-8-sig") -> str:
    """Read a statement export from disk.

    ``utf-8-sig`` transparently drops a BOM when present. ``OSError`` and
    ``UnicodeDecodeError`` propagate unchanged.
    """

    p = Path(path)
    _logger.debug("Reading statement from %s", os.fspath(p))
    return p.read_text(encoding=encoding)


def fetch_statement(url: str, *, timeout: float = DEFAULT_TIMEOUT, encoding: str = "utf-8-sig") -> str:
    """Download a statement export with a single GET request."""

    _logger.debug("Fetching statement from %s", url)
    try:
        req = urllib.request.Request(url, method="GET")
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            body = resp.read()
    except urllib.error.HTTPError as e:
        raise StatementSourceError(f"Failed to load statement: HTTP {e.code} {e.reason}") from e
    except (urllib.error.URLError, TimeoutError) as e:
        reason = getattr(e, "reason", e)
        raise StatementSourceError(f"Failed to load statement: {reason}") from e
    except (OSError, ValueError, http.client.HTTPException) as e:
        # Malformed URLs, dropped connections and truncated bodies.
        raise StatementSourceError(f"Failed to load statement: {e}") from e

    try:
        return body.decode(encoding)
    except UnicodeDecodeError as e:
        raise StatementSourceError(f"Statement at {url} is not valid {encoding} text") from e


def resolve_source(
    csv_path: str | os.PathLike[str] | None = None,
    url: str | None = None,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> Callable[[], str]:
    """Return a zero-argument supplier for the statement text.

    A local path wins over a URL. With neither, ``SALARY_LEDGER_CSV`` and
    then ``SALARY_LEDGER_URL`` are consulted.
    """

    if csv_path is None and url is None:
        env_path = (os.getenv("SALARY_LEDGER_CSV") or "").strip()
        env_url = (os.getenv("SALARY_LEDGER_URL") or "").strip()
        csv_path = env_path or None
        url = env_url or None

    if csv_path is not None:
        path = Path(csv_path).expanduser()
        return lambda: read_statement_file(path)
    if url is not None:
        return lambda: fetch_statement(url, timeout=timeout)
    raise StatementSourceError(
        "No statement source: pass --csv-path or --url "
        "(or set SALARY_LEDGER_CSV / SALARY_LEDGER_URL)."
    )


__all__ = [
    "DEFAULT_TIMEOUT",
    "StatementSourceError",
    "fetch_statement",
    "read_statement_file",
    "resolve_source",
]
