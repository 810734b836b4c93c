"""Relation documents: YAML mappings describing a single relation.

```yaml
schema_version: "1"
name: grading
domain: [1, 2, 3]
codomain: [a, b]
pairs:
  - [1, a]
  - [2, b]
```

``mapping:`` may replace ``pairs`` (left element to one right element or a
list of them). YAML lists used as elements become tuples.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from finrel.canonical import sort_elements
from finrel.constants import DOCUMENT_SCHEMA_VERSION
from finrel.relation import Relation

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class RelationDocument:
    name: str
    relation: Relation[Any, Any]
    source_path: Path | None = None


def _freeze_element(raw: Any, *, field_name: str) -> Any:
    if isinstance(raw, dict):
        raise ValueError(f"{field_name} elements must be scalars or lists, got a mapping")
    if isinstance(raw, list):
        return tuple(_freeze_element(item, field_name=field_name) for item in raw)
    return raw


def parse_element(text: str) -> Any:
    """Parse a command-line token as a YAML scalar, so `1` is an int and `a` a str."""
    return _freeze_element(yaml.safe_load(text), field_name="element")


def _parse_universe(raw: Any, *, field_name: str) -> frozenset[Any]:
    if raw is None:
        raise ValueError(f"{field_name} is required")
    if not isinstance(raw, list):
        raise ValueError(f"{field_name} must be a list")
    return frozenset(_freeze_element(item, field_name=field_name) for item in raw)


def _parse_pairs(raw: Any) -> list[tuple[Any, Any]]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError("pairs must be a list")
    parsed: list[tuple[Any, Any]] = []
    for index, item in enumerate(raw):
        if not isinstance(item, list) or len(item) != 2:
            raise ValueError(f"pairs[{index}] must be a two-item list")
        parsed.append(
            (
                _freeze_element(item[0], field_name="pairs"),
                _freeze_element(item[1], field_name="pairs"),
            )
        )
    return parsed


def _parse_mapping(raw: Any) -> list[tuple[Any, Any]]:
    if not isinstance(raw, dict):
        raise ValueError("mapping must be a mapping")
    parsed: list[tuple[Any, Any]] = []
    for key, value in raw.items():
        left = _freeze_element(key, field_name="mapping")
        targets = value if isinstance(value, list) else [value]
        for target in targets:
            parsed.append((left, _freeze_element(target, field_name="mapping")))
    return parsed


def parse_relation_document(
    data: dict[str, Any],
    *,
    default_name: str = "relation",
    source_path: Path | None = None,
) -> RelationDocument:
    schema_version = data.get("schema_version")
    if schema_version is not None and str(schema_version) != DOCUMENT_SCHEMA_VERSION:
        raise ValueError(
            f"Unsupported schema_version {schema_version!r}; expected {DOCUMENT_SCHEMA_VERSION!r}"
        )
    if "pairs" in data and "mapping" in data:
        raise ValueError("Use either pairs or mapping, not both")

    domain = _parse_universe(data.get("domain"), field_name="domain")
    codomain = _parse_universe(data.get("codomain"), field_name="codomain")
    if "mapping" in data:
        pairs = _parse_mapping(data["mapping"])
    else:
        pairs = _parse_pairs(data.get("pairs"))

    name = data.get("name", default_name)
    relation = Relation(domain=domain, codomain=codomain, pairs=pairs)
    return RelationDocument(name=str(name), relation=relation, source_path=source_path)


def _load_yaml(path: Path) -> dict[str, Any]:
    loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Relation document must be a mapping: {path}")
    return loaded


def load_relation_document(path: Path) -> RelationDocument:
    resolved = path.resolve()
    document = parse_relation_document(
        _load_yaml(resolved),
        default_name=resolved.name.split(".", 1)[0],
        source_path=resolved,
    )
    logger.debug(
        "Loaded relation %s from %s (%d pairs)",
        document.name,
        resolved,
        len(document.relation),
    )
    return document


def load_relation(path: Path) -> Relation[Any, Any]:
    return load_relation_document(path).relation


def _thaw_element(value: Any) -> Any:
    if isinstance(value, tuple):
        return [_thaw_element(item) for item in value]
    return value


def relation_to_document(relation: Relation[Any, Any], name: str) -> dict[str, Any]:
    # Scalars stay native so yaml.safe_dump writes dates, floats and .inf exactly.
    return {
        "schema_version": DOCUMENT_SCHEMA_VERSION,
        "name": name,
        "domain": [_thaw_element(item) for item in sort_elements(relation.domain)],
        "codomain": [_thaw_element(item) for item in sort_elements(relation.codomain)],
        "pairs": [_thaw_element(pair) for pair in sort_elements(relation.pairs)],
    }


def dump_relation(relation: Relation[Any, Any], name: str) -> str:
    return yaml.safe_dump(relation_to_document(relation, name), sort_keys=False)


__all__ = [
    "RelationDocument",
    "dump_relation",
    "load_relation",
    "load_relation_document",
    "parse_element",
    "parse_relation_document",
    "relation_to_document",
]
