"""
Move ordering for the coalition search.

Alpha-beta only prunes well when strong moves are searched first. Every
child is already simulated before recursion (to score runaways), so the
ordering key is simply its immediate material for the focus player:

- focus turn: highest material first
- coalition turn: lowest material first

Root candidates are ordered by (immediate gain, attack, defense), all
descending. Sorts are stable, so equal keys keep row-major order.
"""

from typing import Sequence, TypeVar

T = TypeVar('T')


def order_children(children: Sequence[T], maximizing: bool, key=lambda child: child.value) -> list[T]:
    return sorted(children, key=key, reverse=maximizing)


def _ranking_key(candidate):
    return (candidate.score, candidate.attack, candidate.defense)


def order_root_candidates(candidates: Sequence[T]) -> list[T]:
    """Best first by (score, attack, defense)."""
    return sorted(candidates, key=_ranking_key, reverse=True)


def top_ranked(candidates: Sequence[T]) -> list[T]:
    """All candidates tied with the best (score, attack, defense) triple."""
    ordered = order_root_candidates(candidates)
    if not ordered:
        return []
    best = _ranking_key(ordered[0])
    return [c for c in ordered if _ranking_key(c) == best]
