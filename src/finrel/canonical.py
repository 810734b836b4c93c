from __future__ import annotations

import hashlib
import json
import math
from collections.abc import Iterable, Mapping, Sequence, Set
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from finrel.relation import Relation


def _element_sort_key(value: Any) -> tuple[Any, ...]:
    """Total order over mixed element types: None, numbers, strings, tuples, other."""
    if value is None:
        return (0,)
    if isinstance(value, (bool, int, float)):
        if isinstance(value, float) and math.isnan(value):
            return (1, math.inf, "NaN")
        return (1, value, "")
    if isinstance(value, str):
        return (2, value)
    if isinstance(value, tuple):
        return (3, tuple(_element_sort_key(item) for item in value))
    return (4, type(value).__name__, repr(value))


def sort_elements(elements: Iterable[Any]) -> list[Any]:
    return sorted(elements, key=_element_sort_key)


def _normalize_float(value: float) -> float | str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return round(value, 12)


def normalize_for_json(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key): normalize_for_json(value[key]) for key in sorted(value.keys(), key=str)}
    if isinstance(value, Set):
        return [normalize_for_json(item) for item in sort_elements(value)]
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [normalize_for_json(item) for item in value]
    if isinstance(value, float):
        return _normalize_float(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if value is None or isinstance(value, (str, int, bool)):
        return value
    return str(value)


def canonical_dumps(value: Any) -> str:
    normalized = normalize_for_json(value)
    return json.dumps(normalized, sort_keys=True, separators=(",", ":"), ensure_ascii=True)


def relation_to_dict(relation: Relation[Any, Any]) -> dict[str, Any]:
    """Order-independent JSON-ready form of ``relation``."""
    return {
        "domain": normalize_for_json(relation.domain),
        "codomain": normalize_for_json(relation.codomain),
        "pairs": [normalize_for_json(pair) for pair in sort_elements(relation.pairs)],
    }


def _tagged_element(value: Any) -> Any:
    """Lossless JSON form of an element; elements equal in Python map to the same form."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        return {"__float__": repr(value)}
    if isinstance(value, tuple):
        return [_tagged_element(item) for item in value]
    return {"__type__": f"{type(value).__module__}.{type(value).__qualname__}", "repr": repr(value)}


def relation_fingerprint(relation: Relation[Any, Any]) -> str:
    payload = {
        "domain": [_tagged_element(item) for item in sort_elements(relation.domain)],
        "codomain": [_tagged_element(item) for item in sort_elements(relation.codomain)],
        "pairs": [_tagged_element(pair) for pair in sort_elements(relation.pairs)],
    }
    digest = hashlib.sha256(canonical_dumps(payload).encode("utf-8"))
    return digest.hexdigest()


__all__ = [
    "canonical_dumps",
    "normalize_for_json",
    "relation_fingerprint",
    "relation_to_dict",
    "sort_elements",
]
