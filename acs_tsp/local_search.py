"""Tour refinement operators: windowed 2-opt and block Or-opt.

Both work in place on a list of city indices and only ever accept strictly
improving moves, so the tour never gets longer.
"""
from __future__ import annotations
from typing import List, Optional, Sequence, Tuple

from .aco_base import positions_of
from .candidates import CandidateIndex
from .tsp import TSPInstance

TWO_OPT_WINDOW = 200
TWO_OPT_EPS = 1e-8
BOOTSTRAP_TWO_OPT_PASSES = 5
ANT_TWO_OPT_PASSES = 8

OR_OPT_BLOCK_SIZES = (3, 2, 1)
OR_OPT_MAX_MOVES = 10
OR_OPT_EPS = 1e-6


def two_opt(tour: List[int], instance: TSPInstance, window: int = TWO_OPT_WINDOW,
            max_passes: int = ANT_TWO_OPT_PASSES) -> bool:
    """Reverse segments tour[i..j] with j - i < window while that shortens the tour.

    Stops after a pass without an improving move or after ``max_passes``.
    Returns True if at least one reversal was made.
    """
    n = len(tour)
    d = instance.distance
    improved_any = False
    improved = True
    passes = 0
    while improved and passes < max_passes:
        improved = False
        passes += 1
        for i in range(1, n - 1):
            limit = min(n, i + window)
            for j in range(i + 1, limit):
                u, v = tour[i - 1], tour[i]
                w, z = tour[j], tour[(j + 1) % n]
                if d(u, w) + d(v, z) < d(u, v) + d(w, z) - TWO_OPT_EPS:
                    tour[i:j + 1] = tour[i:j + 1][::-1]
                    improved = True
        improved_any = improved_any or improved
    return improved_any


def _first_block_move(tour: Sequence[int], pos: Sequence[int], size: int,
                      instance: TSPInstance, candidates: CandidateIndex) -> Optional[Tuple[int, int]]:
    n = len(tour)
    d = instance.distance
    for i in range(n - size - 1):
        start, end = tour[i], tour[i + size - 1]
        prev_idx = i - 1 if i > 0 else n - 1
        prev, nxt = tour[prev_idx], tour[i + size]
        gain = d(prev, start) + d(end, nxt) - d(prev, nxt)

        for target in candidates[start]:
            t_idx = pos[target]
            # inside the block, or adjacent to it where the move is a no-op
            if t_idx == prev_idx or i <= t_idx <= i + size:
                continue
            after = tour[(t_idx + 1) % n]
            cost = d(target, start) + d(end, after) - d(target, after)
            if gain > cost + OR_OPT_EPS:
                return i, t_idx
    return None


def _relocate_block(tour: List[int], i: int, t_idx: int, size: int) -> None:
    block = tour[i:i + size]
    del tour[i:i + size]
    if t_idx > i:
        t_idx -= size
    tour[t_idx + 1:t_idx + 1] = block


def or_opt(tour: List[int], instance: TSPInstance, candidates: CandidateIndex,
           block_sizes: Sequence[int] = OR_OPT_BLOCK_SIZES, max_moves: int = OR_OPT_MAX_MOVES) -> bool:
    """Move blocks of consecutive cities next to a candidate of their first city.

    Block sizes are tried in order; each accepts at most ``max_moves``
    relocations and rescans from the start after every one. Returns True if
    any block was moved.
    """
    improved = False
    pos = positions_of(tour)
    for size in block_sizes:
        moves = 0
        while moves < max_moves:
            move = _first_block_move(tour, pos, size, instance, candidates)
            if move is None:
                break
            _relocate_block(tour, move[0], move[1], size)
            pos = positions_of(tour)
            moves += 1
            improved = True
    return improved
