"""Column rules per instrument kind and quote type.

The catalog only answers questions: which columns, in which order, with which
literal defaults, for a given instrument kind and quote type. Loading the rules
from configuration lives in ``ledgerquote.config.schemas``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from ledgerquote.domain.model import InstrumentKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

DEFAULT_STALE_DAYS: Final[int] = 5
WHOLE_DATE_COLUMN: Final[str] = "dt"
LAST_UPDATE_COLUMN: Final[str] = "dtLastUpdate"
RATE_COLUMN: Final[str] = "rate"


@dataclass(frozen=True, slots=True)
class ColumnRule:
    """One ``column[,defaultLiteral]`` entry."""

    name: str
    default: str | None = None

    @classmethod
    def parse(cls, entry: str) -> ColumnRule:
        name, separator, default = entry.partition(",")
        name = name.strip()
        if not name:
            raise ValueError(f"Column entry without a name: {entry!r}")
        return cls(name=name, default=default.strip() if separator else None)

    def __str__(self) -> str:
        return self.name if self.default is None else f"{self.name},{self.default}"


@dataclass(frozen=True, slots=True)
class InstrumentSchema:
    kind: InstrumentKind
    required: tuple[ColumnRule, ...]
    optional: Mapping[str, tuple[ColumnRule, ...]] = field(default_factory=dict)
    stale_days: int = DEFAULT_STALE_DAYS

    @property
    def quote_types(self) -> frozenset[str]:
        return frozenset(self.optional)

    def optional_for(self, quote_type: str) -> tuple[ColumnRule, ...]:
        return self.optional.get(quote_type, ())

    def columns_for(self, quote_type: str) -> tuple[ColumnRule, ...]:
        """Required columns followed by the quote type's optional columns."""

        return self.required + self.optional_for(quote_type)

    def is_required(self, column: str) -> bool:
        return any(rule.name == column for rule in self.required)


class SchemaCatalog:
    """Lookup of ``InstrumentSchema`` by instrument kind."""

    def __init__(self, schemas: Iterable[InstrumentSchema]) -> None:
        self._schemas: dict[InstrumentKind, InstrumentSchema] = {}
        for schema in schemas:
            if schema.kind in self._schemas:
                raise ValueError(f"Duplicate schema for instrument kind {schema.kind}")
            self._schemas[schema.kind] = schema

    def schema_for(self, kind: InstrumentKind) -> InstrumentSchema:
        try:
            return self._schemas[kind]
        except KeyError:
            raise LookupError(f"No column schema configured for {kind}") from None

    def kinds(self) -> tuple[InstrumentKind, ...]:
        return tuple(self._schemas)

    def kind_for_quote_type(
        self,
        quote_type: str,
        *,
        fallback: InstrumentKind = InstrumentKind.SECURITY,
    ) -> InstrumentKind:
        """Return the kind whose optional schema declares ``quote_type``."""

        for kind, schema in self._schemas.items():
            if quote_type in schema.quote_types:
                return kind
        if quote_type == InstrumentKind.CURRENCY.value:
            return InstrumentKind.CURRENCY
        return fallback
