"""Helpers for deterministic ordering and tie-breaking."""

from __future__ import annotations

from collections import defaultdict
from typing import Callable, Hashable, Iterable, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def stable_sorted(items: Iterable[T], key: Callable[[T], object]) -> list[T]:
    return sorted(items, key=key)


def choose_names(pairs: Iterable[tuple[K, str]]) -> tuple[dict[K, str], dict[K, list[str]]]:
    """Pick one name per key; the smallest name wins.

    Returns the chosen names and, for keys seen with more than one name, the
    sorted list of every candidate.
    """
    candidates: dict[K, set[str]] = defaultdict(set)
    for key, name in pairs:
        candidates[key].add(name)

    chosen: dict[K, str] = {}
    conflicts: dict[K, list[str]] = {}
    for key, names in candidates.items():
        ordered = sorted(names)
        chosen[key] = ordered[0]
        if len(ordered) > 1:
            conflicts[key] = ordered
    return chosen, conflicts


def assign_surrogate_ids(keys: Iterable[K], sort_key: Callable[[K], object]) -> dict[K, int]:
    """Number distinct keys 1..n in ``sort_key`` order."""
    ordered = stable_sorted(set(keys), key=sort_key)
    return {key: idx for idx, key in enumerate(ordered, start=1)}
