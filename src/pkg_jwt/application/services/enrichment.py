from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, MutableMapping, Tuple

from ...domain.ports import PayloadEnrichment, UserIdentity

EnrichmentFunc = Callable[[UserIdentity, MutableMapping[str, Any]], None]


class NullEnrichment:
    """Leaves the payload untouched."""

    def enrich(self, user: UserIdentity, payload: MutableMapping[str, Any]) -> None:
        return None


@dataclass(frozen=True, slots=True)
class CallableEnrichment:
    """Adapts a plain `(user, payload) -> None` function to the enrichment port."""

    func: EnrichmentFunc

    def enrich(self, user: UserIdentity, payload: MutableMapping[str, Any]) -> None:
        self.func(user, payload)


class ChainEnrichment:
    """
    Runs several enrichments in order against the same payload.

    Later enrichments see (and may overwrite) what earlier ones added.
    """

    __slots__ = ("_enrichments",)

    def __init__(self, *enrichments: PayloadEnrichment | EnrichmentFunc) -> None:
        self._enrichments: Tuple[PayloadEnrichment, ...] = tuple(
            as_enrichment(e) for e in enrichments
        )

    def enrich(self, user: UserIdentity, payload: MutableMapping[str, Any]) -> None:
        for enrichment in self._enrichments:
            enrichment.enrich(user, payload)

    def __len__(self) -> int:
        return len(self._enrichments)


def as_enrichment(value: PayloadEnrichment | EnrichmentFunc) -> PayloadEnrichment:
    """
    Normalize an enrichment object or a bare function into a PayloadEnrichment.
    """
    if hasattr(value, "enrich"):
        return value  # type: ignore[return-value]
    if callable(value):
        return CallableEnrichment(value)
    raise TypeError(
        f"Expected an object with enrich(user, payload) or a callable, got {type(value).__name__}"
    )
