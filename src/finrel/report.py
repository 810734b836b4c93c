from __future__ import annotations

import json
from typing import Any

from finrel.canonical import normalize_for_json
from finrel.classify import RelationProfile, classify
from finrel.relation import Relation


def _flag(value: bool | None) -> str:
    if value is None:
        return "n/a"
    return "yes" if value else "no"


def render_markdown(name: str, relation: Relation[Any, Any], profile: RelationProfile | None = None) -> str:
    profile = profile or classify(relation)
    lines: list[str] = []
    lines.append(f"## Relation Report: {name}")
    lines.append("")
    lines.append(f"- Kind: **{profile.kind}**")
    lines.append(f"- Pairs: **{profile.pair_count}**")
    lines.append(f"- Fingerprint: `{profile.fingerprint}`")

    lines.append("")
    lines.append("### Universes")
    lines.append("")
    lines.append("| Side | Declared | Used |")
    lines.append("|---|---:|---:|")
    lines.append(f"| Domain | {profile.domain_size} | {profile.defined_count} |")
    lines.append(f"| Codomain | {profile.codomain_size} | {profile.range_count} |")

    lines.append("")
    lines.append("### Properties")
    lines.append("")
    lines.append("| Property | Holds |")
    lines.append("|---|---|")
    lines.append(f"| Function | {_flag(profile.is_function)} |")
    lines.append(f"| Total | {_flag(profile.is_total)} |")
    lines.append(f"| Partial | {_flag(profile.is_partial)} |")
    lines.append(f"| Injective | {_flag(profile.is_injective)} |")
    lines.append(f"| Surjective | {_flag(profile.is_surjective)} |")
    lines.append(f"| Bijective | {_flag(profile.is_bijective)} |")

    undefined = relation.domain - relation.defined_domain()
    if undefined:
        lines.append("")
        lines.append("### Undefined Elements")
        lines.append("")
        for element in normalize_for_json(undefined):
            lines.append(f"- `{json.dumps(element)}`")

    lines.append("")
    return "\n".join(lines)


def render_json(name: str, relation: Relation[Any, Any], profile: RelationProfile | None = None) -> str:
    profile = profile or classify(relation)
    payload = {"name": name, **profile.to_dict()}
    return json.dumps(payload, indent=2, sort_keys=True)


__all__ = ["render_json", "render_markdown"]
