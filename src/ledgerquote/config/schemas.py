"""Load quote column schemas from TOML files.

Each instrument kind has one file (``security.toml``, ``currency.toml``)::

    stale_days = 5
    required = ["xSymbol", "xType", "dtLastUpdate", "dPrice"]

    [optional]
    stock = ["dChange,0.0", "dOpen", "vol,0"]

Entries follow the ``column[,defaultLiteral]`` convention. Packaged defaults live
in ``ledgerquote/config/defaults``; ``LEDGERQUOTE_SCHEMA_DIR`` points at a
directory whose files take precedence.
"""

from __future__ import annotations

import os
import tomllib
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ledgerquote.domain.model import InstrumentKind
from ledgerquote.domain.schema import (
    DEFAULT_STALE_DAYS,
    ColumnRule,
    InstrumentSchema,
    SchemaCatalog,
)

from .env import optional_env_int
from .errors import SchemaConfigurationError

if TYPE_CHECKING:
    from importlib.resources.abc import Traversable

SCHEMA_DIR_ENV = "LEDGERQUOTE_SCHEMA_DIR"
STALE_DAYS_ENV = "LEDGERQUOTE_STALE_DAYS"


def _check_entry(entry: str) -> str:
    ColumnRule.parse(entry)
    return entry.strip()


class SchemaFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    stale_days: int = Field(default=DEFAULT_STALE_DAYS, ge=0)
    required: list[str] = Field(min_length=1)
    optional: dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("required")
    @classmethod
    def _validate_required(cls, value: list[str]) -> list[str]:
        return [_check_entry(entry) for entry in value]

    @field_validator("optional")
    @classmethod
    def _validate_optional(cls, value: dict[str, list[str]]) -> dict[str, list[str]]:
        return {
            quote_type: [_check_entry(entry) for entry in entries]
            for quote_type, entries in value.items()
        }

    def to_schema(self, kind: InstrumentKind, *, stale_days: int | None = None) -> InstrumentSchema:
        return InstrumentSchema(
            kind=kind,
            required=tuple(ColumnRule.parse(entry) for entry in self.required),
            optional={
                quote_type: tuple(ColumnRule.parse(entry) for entry in entries)
                for quote_type, entries in self.optional.items()
            },
            stale_days=self.stale_days if stale_days is None else stale_days,
        )


def _schema_source(kind: InstrumentKind, schema_dir: Path | None) -> Traversable:
    filename = f"{kind.value}.toml"
    if schema_dir is not None:
        candidate = schema_dir / filename
        if candidate.is_file():
            return candidate
    return resources.files("ledgerquote.config").joinpath("defaults", filename)


def load_schema(
    kind: InstrumentKind,
    *,
    schema_dir: Path | None = None,
    stale_days: int | None = None,
) -> InstrumentSchema:
    """Load and validate the schema file for ``kind``."""

    source = _schema_source(kind, schema_dir)
    try:
        with source.open("rb") as handle:
            document = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise SchemaConfigurationError(f"Cannot read {kind} schema from {source}: {exc}") from exc

    try:
        parsed = SchemaFile.model_validate(document)
    except ValidationError as exc:
        raise SchemaConfigurationError(f"Invalid {kind} schema in {source}: {exc}") from exc
    return parsed.to_schema(kind, stale_days=stale_days)


def get_schema_catalog(
    *,
    schema_dir: Path | None = None,
    stale_days: int | None = None,
) -> SchemaCatalog:
    """Build the catalog for every instrument kind, honouring environment overrides."""

    if schema_dir is None:
        env_dir = os.getenv(SCHEMA_DIR_ENV)
        schema_dir = Path(env_dir).expanduser() if env_dir else None
    if stale_days is None:
        stale_days = optional_env_int(STALE_DAYS_ENV)
    return SchemaCatalog(
        load_schema(kind, schema_dir=schema_dir, stale_days=stale_days) for kind in InstrumentKind
    )
