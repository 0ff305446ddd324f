"""Read raw quote rows from CSV or JSON Lines files."""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ledgerquote.domain.model import RawRow

log = logging.getLogger(__name__)

JSON_LINES_SUFFIXES: Final[frozenset[str]] = frozenset({".jsonl", ".ndjson"})


class QuoteFileError(ValueError):
    """Raised when a quote file cannot be parsed."""


def _compact(row: dict[str, object]) -> dict[str, object]:
    """Drop empty cells so that they count as missing columns."""

    compacted: dict[str, object] = {}
    for key, value in row.items():
        if key is None or value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        compacted[str(key).strip()] = value
    return compacted


class QuoteFileFeed:
    """``QuoteFeed`` over a CSV file (header row = column names) or JSON Lines.

    The format is chosen from the file suffix: ``.jsonl``/``.ndjson`` are read
    as one JSON object per line, anything else as CSV. A leading UTF-8
    byte order mark is skipped. Undecodable text and malformed CSV raise
    ``QuoteFileError``.
    """

    def __init__(self, path: Path | str, *, encoding: str = "utf-8-sig") -> None:
        self.path = Path(path)
        self.encoding = encoding

    @property
    def is_json_lines(self) -> bool:
        return self.path.suffix.lower() in JSON_LINES_SUFFIXES

    def __iter__(self) -> Iterator[RawRow]:
        log.info("Reading quotes from %s", self.path)
        try:
            if self.is_json_lines:
                yield from self._iter_json_lines()
            else:
                yield from self._iter_csv()
        except UnicodeDecodeError as exc:
            raise QuoteFileError(f"{self.path} is not valid {self.encoding} text: {exc}") from exc
        except csv.Error as exc:
            raise QuoteFileError(f"Malformed CSV in {self.path}: {exc}") from exc

    def _iter_csv(self) -> Iterator[RawRow]:
        with self.path.open(newline="", encoding=self.encoding) as handle:
            for row in csv.DictReader(handle, strict=True):
                compacted = _compact(dict(row))
                if compacted:
                    yield compacted

    def _iter_json_lines(self) -> Iterator[RawRow]:
        with self.path.open(encoding=self.encoding) as handle:
            for line_number, line in enumerate(handle, start=1):
                if not line.strip():
                    continue
                try:
                    payload = json.loads(line)
                except json.JSONDecodeError as exc:
                    raise QuoteFileError(
                        f"Invalid JSON on line {line_number} of {self.path}: {exc}"
                    ) from exc
                if not isinstance(payload, dict):
                    raise QuoteFileError(
                        f"Expected an object on line {line_number} of {self.path}"
                    )
                yield _compact(payload)
