"""JSON form of a range mapping: the bundled file and the file cache.

Schema: {prefix: {"name": str, "list": [{"start": int, "end": int,
"length": int}, ...]}}. dump_ranges output is canonical (sorted keys,
compact separators), so equal mappings serialize to equal bytes.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from bookcode.core.result import Err, Ok
from bookcode.ranges.types import Range, RangeGroup

type RangeMap = dict[str, RangeGroup]


def _group_to_json(group: RangeGroup) -> dict[str, Any]:
    return {
        "name": group.name,
        "list": [{"start": r.start, "end": r.end, "length": r.length} for r in group.ranges],
    }


def dump_ranges(mapping: Mapping[str, RangeGroup]) -> str:
    return json.dumps(
        {prefix: _group_to_json(group) for prefix, group in mapping.items()},
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def _group_from_json(prefix: str, raw: object) -> Ok[RangeGroup] | Err[str]:
    if not isinstance(raw, dict):
        return Err(f"Group at prefix '{prefix}' must be an object")
    name = raw.get("name")
    items = raw.get("list")
    if not isinstance(name, str) or not isinstance(items, list):
        return Err(f"Group at prefix '{prefix}' needs 'name' and 'list'")
    ranges: list[Range] = []
    for item in items:
        if not isinstance(item, dict):
            return Err(f"Range at prefix '{prefix}' must be an object")
        bounds = (item.get("start"), item.get("end"), item.get("length"))
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in bounds):
            return Err(f"Range at prefix '{prefix}' needs integer start, end, length")
        start, end, length = bounds
        match Range.create(start, end, length):  # type: ignore[arg-type]
            case Err(e):
                return Err(f"{e} at prefix '{prefix}'")
            case Ok(r):
                ranges.append(r)
    return Ok(RangeGroup(name=name, ranges=tuple(ranges)))


def load_ranges(text: str | bytes) -> Ok[RangeMap] | Err[str]:
    """Decode a range mapping. Never raises on malformed input."""
    try:
        raw = json.loads(text)
    except ValueError as e:
        return Err(f"Range mapping is not valid JSON: {e}")
    if not isinstance(raw, dict):
        return Err("Range mapping must be a JSON object")
    mapping: RangeMap = {}
    for prefix, group_raw in raw.items():
        match _group_from_json(prefix, group_raw):
            case Err() as e:
                return e
            case Ok(group):
                mapping[prefix] = group
    return Ok(mapping)
