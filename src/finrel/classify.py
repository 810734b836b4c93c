"""One-shot classification of a relation.

``classify`` evaluates every predicate of :class:`~finrel.relation.Relation`
once and folds them into a :class:`RelationProfile`. Predicates that are only
meaningful for functions (injective, surjective, bijective) are reported as
``None`` for non-functions rather than raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from finrel.canonical import relation_fingerprint
from finrel.constants import (
    KIND_BIJECTION,
    KIND_FUNCTION,
    KIND_INJECTION,
    KIND_RELATION,
    KIND_SURJECTION,
)
from finrel.relation import Relation


@dataclass(slots=True, frozen=True)
class RelationProfile:
    domain_size: int
    codomain_size: int
    pair_count: int
    defined_count: int
    range_count: int
    is_function: bool
    is_total: bool
    is_injective: bool | None
    is_surjective: bool | None
    is_bijective: bool | None
    fingerprint: str

    @property
    def is_partial(self) -> bool:
        return not self.is_total

    @property
    def kind(self) -> str:
        if not self.is_function:
            return KIND_RELATION
        if self.is_bijective:
            return KIND_BIJECTION
        if self.is_injective:
            return KIND_INJECTION
        if self.is_surjective:
            return KIND_SURJECTION
        return KIND_FUNCTION

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "domain_size": self.domain_size,
            "codomain_size": self.codomain_size,
            "pair_count": self.pair_count,
            "defined_count": self.defined_count,
            "range_count": self.range_count,
            "is_function": self.is_function,
            "is_total": self.is_total,
            "is_partial": self.is_partial,
            "is_injective": self.is_injective,
            "is_surjective": self.is_surjective,
            "is_bijective": self.is_bijective,
            "fingerprint": self.fingerprint,
        }


def classify(relation: Relation[Any, Any]) -> RelationProfile:
    is_function = relation.is_function()
    injective = relation.is_injective() if is_function else None
    surjective = relation.is_surjective() if is_function else None
    return RelationProfile(
        domain_size=len(relation.domain),
        codomain_size=len(relation.codomain),
        pair_count=len(relation),
        defined_count=len(relation.defined_domain()),
        range_count=len(relation.range()),
        is_function=is_function,
        is_total=relation.is_total(),
        is_injective=injective,
        is_surjective=surjective,
        is_bijective=(injective and surjective) if is_function else None,
        fingerprint=relation_fingerprint(relation),
    )


__all__ = ["RelationProfile", "classify"]
