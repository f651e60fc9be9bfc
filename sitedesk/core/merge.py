"""Default/override merge: seed rows plus user rows as one logical collection."""

from typing import Callable, Iterable


def by_name(record: dict) -> str:
    return str(record.get("name", "")).strip().lower()


def by_id(record: dict) -> str:
    return str(record.get("id", ""))


def merge_records(defaults: Iterable[dict], user_records: Iterable[dict],
                  key: Callable = by_name) -> list:
    """Seeds first, then user rows in creation order.

    A user row whose natural key collides with an earlier row is dropped.
    Services reject such rows at creation time, so this only matters for
    data written by something else (hand-edited storage, another process).
    """
    seen = set()
    merged = []
    for record in list(defaults) + list(user_records):
        k = key(record)
        if k in seen:
            continue
        seen.add(k)
        merged.append(record)
    return merged


def unique_names(*groups: Iterable[str]) -> list:
    """Order-preserving de-duplicated list of names (dropdown options)."""
    seen = set()
    out = []
    for group in groups:
        for name in group:
            if name and name not in seen:
                seen.add(name)
                out.append(name)
    return out


def name_exists(records: Iterable[dict], name: str, exclude_id: str = None) -> bool:
    """Case-insensitive name scan, optionally ignoring one record."""
    wanted = name.strip().lower()
    return any(
        str(r.get("name", "")).strip().lower() == wanted and str(r.get("id")) != str(exclude_id)
        for r in records
    )
