"""Finite binary relations between a declared domain and codomain.

A :class:`Relation` is three frozensets: the ``domain`` and ``codomain``
universes and the ``pairs`` actually related. Construction checks that every
pair draws its components from the universes; after that the instance is
immutable, so the check never has to run again and every derived relation
(``inverse``, ``compose``, ``restrict``) is a new instance.

**Indexes:** a forward index (left element to its images) and a backward
index (right element to its preimages) are built once at construction. All
image/preimage queries and classification predicates read these indexes
instead of rescanning ``pairs``.

**Preconditions:** operations with a precondition check it first and raise a
:class:`~finrel.errors.PreconditionViolation` subclass. Nothing degrades to a
default value.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from finrel.canonical import sort_elements
from finrel.constants import ERROR_CODE_MALFORMED_PAIR, ERROR_CODE_PAIR_OUTSIDE_UNIVERSE
from finrel.errors import (
    CompositionMismatchError,
    InvalidRelationError,
    NotAFunctionError,
    OutsideUniverseError,
    UndefinedElementError,
)

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Hashable)
T = TypeVar("T", bound=Hashable)
R = TypeVar("R", bound=Hashable)

_EMPTY: frozenset[Any] = frozenset()


def _validated_pairs(
    domain: frozenset[Any],
    codomain: frozenset[Any],
    raw_pairs: Iterable[Any],
) -> frozenset[tuple[Any, Any]]:
    """Freeze ``raw_pairs``, failing on the first pair (in input order) that is
    malformed or escapes the universes."""
    checked: list[tuple[Any, Any]] = []
    for raw in raw_pairs:
        try:
            if isinstance(raw, (str, bytes, bytearray)):
                raise TypeError("text is not a pair")
            left, right = raw
        except (TypeError, ValueError):
            logger.debug("Rejected malformed pair %r", raw)
            raise InvalidRelationError(
                ERROR_CODE_MALFORMED_PAIR,
                f"Pair must have exactly two components: {raw!r}",
                pair=raw,
            ) from None
        pair = (left, right)
        if left not in domain:
            logger.debug("Rejected pair %r: left component outside domain", pair)
            raise InvalidRelationError(
                ERROR_CODE_PAIR_OUTSIDE_UNIVERSE,
                f"Pair {pair!r} references {left!r}, which is not in the domain",
                pair=pair,
                details={"side": "domain", "element": left},
            )
        if right not in codomain:
            logger.debug("Rejected pair %r: right component outside codomain", pair)
            raise InvalidRelationError(
                ERROR_CODE_PAIR_OUTSIDE_UNIVERSE,
                f"Pair {pair!r} references {right!r}, which is not in the codomain",
                pair=pair,
                details={"side": "codomain", "element": right},
            )
        checked.append(pair)
    return frozenset(checked)


def _index(pairs: Iterable[tuple[Any, Any]], *, backward: bool) -> dict[Any, frozenset[Any]]:
    grouped: dict[Any, set[Any]] = {}
    for left, right in pairs:
        key, value = (right, left) if backward else (left, right)
        grouped.setdefault(key, set()).add(value)
    return {key: frozenset(values) for key, values in grouped.items()}


@dataclass(frozen=True, slots=True)
class Relation(Generic[S, T]):
    domain: frozenset[S]
    codomain: frozenset[T]
    pairs: frozenset[tuple[S, T]] = _EMPTY
    _forward: dict[S, frozenset[T]] = field(init=False, repr=False, compare=False)
    _backward: dict[T, frozenset[S]] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        domain = frozenset(self.domain)
        codomain = frozenset(self.codomain)
        pairs = _validated_pairs(domain, codomain, self.pairs)
        object.__setattr__(self, "domain", domain)
        object.__setattr__(self, "codomain", codomain)
        object.__setattr__(self, "pairs", pairs)
        object.__setattr__(self, "_forward", _index(pairs, backward=False))
        object.__setattr__(self, "_backward", _index(pairs, backward=True))

    # -- alternate constructors ------------------------------------------------

    @classmethod
    def identity(cls, universe: Iterable[S]) -> Relation[S, S]:
        elements = frozenset(universe)
        return cls(domain=elements, codomain=elements, pairs=frozenset((x, x) for x in elements))

    @classmethod
    def empty(cls, domain: Iterable[S], codomain: Iterable[T]) -> Relation[S, T]:
        return cls(domain=frozenset(domain), codomain=frozenset(codomain))

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[S, T],
        domain: Iterable[S] | None = None,
        codomain: Iterable[T] | None = None,
    ) -> Relation[S, T]:
        """Build a function-shaped relation from ``mapping``.

        Universes default to the mapping's own keys and values.
        """
        return cls(
            domain=frozenset(mapping.keys() if domain is None else domain),
            codomain=frozenset(mapping.values() if codomain is None else codomain),
            pairs=frozenset(mapping.items()),
        )

    # -- container protocol ----------------------------------------------------

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[tuple[S, T]]:
        return iter(self.pairs)

    def __contains__(self, pair: object) -> bool:
        return pair in self.pairs

    # -- classification --------------------------------------------------------

    def _non_function_witness(self) -> S | None:
        offenders = [left for left, images in self._forward.items() if len(images) > 1]
        if not offenders:
            return None
        return sort_elements(offenders)[0]

    def _require_function(self, operation: str) -> None:
        witness = self._non_function_witness()
        if witness is not None:
            raise NotAFunctionError(operation, witness, self._forward[witness])

    def is_function(self) -> bool:
        return all(len(images) == 1 for images in self._forward.values())

    def is_injective(self) -> bool:
        self._require_function("is_injective")
        return all(len(preimages) == 1 for preimages in self._backward.values())

    def is_surjective(self) -> bool:
        self._require_function("is_surjective")
        return len(self._backward) == len(self.codomain)

    def is_total(self) -> bool:
        return len(self._forward) == len(self.domain)

    def is_partial(self) -> bool:
        return not self.is_total()

    def is_bijective(self) -> bool:
        self._require_function("is_bijective")
        return self.is_injective() and self.is_surjective()

    # -- membership and queries ------------------------------------------------

    def in_domain(self, element: Any) -> bool:
        return element in self.domain

    def in_codomain(self, element: Any) -> bool:
        return element in self.codomain

    def is_defined_for(self, element: S) -> bool:
        if element not in self.domain:
            raise OutsideUniverseError("is_defined_for", element, "domain")
        return element in self._forward

    def in_range(self, element: T) -> bool:
        if element not in self.codomain:
            raise OutsideUniverseError("in_range", element, "codomain")
        return element in self._backward

    def defined_domain(self) -> frozenset[S]:
        return frozenset(self._forward)

    def range(self) -> frozenset[T]:
        return frozenset(self._backward)

    def image(self, element: Any) -> frozenset[T]:
        return self._forward.get(element, _EMPTY)

    def image_of_set(self, elements: Iterable[Any]) -> frozenset[T]:
        result: set[T] = set()
        for element in elements:
            result.update(self._forward.get(element, _EMPTY))
        return frozenset(result)

    def preimage(self, element: Any) -> frozenset[S]:
        return self._backward.get(element, _EMPTY)

    def preimage_of_set(self, elements: Iterable[Any]) -> frozenset[S]:
        result: set[S] = set()
        for element in elements:
            result.update(self._backward.get(element, _EMPTY))
        return frozenset(result)

    def functional_image(self, element: S) -> T:
        self._require_function("functional_image")
        if element not in self.domain:
            raise OutsideUniverseError("functional_image", element, "domain")
        images = self._forward.get(element)
        if not images:
            raise UndefinedElementError("functional_image", element)
        (value,) = images
        return value

    def to_mapping(self) -> dict[S, T]:
        self._require_function("to_mapping")
        return {left: next(iter(images)) for left, images in self._forward.items()}

    # -- derived relations -----------------------------------------------------

    def inverse(self) -> Relation[T, S]:
        return Relation(
            domain=self.codomain,
            codomain=self.domain,
            pairs=frozenset((right, left) for left, right in self.pairs),
        )

    def compose(self, other: Relation[T, R]) -> Relation[S, R]:
        """Relational composition: ``self`` first, then ``other``.

        ``other.domain`` must equal ``self.codomain`` exactly; a subset is not
        enough.
        """
        if other.domain != self.codomain:
            raise CompositionMismatchError(
                left_only=self.codomain - other.domain,
                right_only=other.domain - self.codomain,
            )
        composed: set[tuple[S, R]] = set()
        for left, middles in self._forward.items():
            for middle in middles:
                for right in other._forward.get(middle, _EMPTY):
                    composed.add((left, right))
        logger.debug(
            "Composed %d x %d pairs into %d pairs",
            len(self.pairs),
            len(other.pairs),
            len(composed),
        )
        return Relation(domain=self.domain, codomain=other.codomain, pairs=frozenset(composed))

    def restrict(self, elements: Iterable[S]) -> Relation[S, T]:
        subset = frozenset(elements)
        outside = subset - self.domain
        if outside:
            raise OutsideUniverseError("restrict", sort_elements(outside)[0], "domain")
        return Relation(
            domain=subset,
            codomain=self.codomain,
            pairs=frozenset(pair for pair in self.pairs if pair[0] in subset),
        )


__all__ = ["Relation"]
