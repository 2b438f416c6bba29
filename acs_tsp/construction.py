from __future__ import annotations
import math
from typing import List

from .candidates import CandidateIndex
from .local_search import BOOTSTRAP_TWO_OPT_PASSES, two_opt
from .tsp import TSPInstance


def nearest_unvisited(instance: TSPInstance, current: int, visited: List[bool]) -> int:
    best, best_dist = -1, math.inf
    for j, seen in enumerate(visited):
        if not seen:
            d = instance.distance(current, j)
            if d < best_dist:
                best, best_dist = j, d
    return best


def greedy_tour(instance: TSPInstance, candidates: CandidateIndex) -> List[int]:
    """Nearest-neighbour walk from city 0 over the candidate lists.

    Falls back to a full scan when every candidate of the current city has
    already been visited.
    """
    n = instance.n_cities()
    visited = [False] * n
    tour = [0]
    visited[0] = True
    current = 0
    for _ in range(1, n):
        nxt = next((c for c in candidates[current] if not visited[c]), None)
        if nxt is None:
            nxt = nearest_unvisited(instance, current, visited)
        tour.append(nxt)
        visited[nxt] = True
        current = nxt
    return tour


def refined_greedy_tour(instance: TSPInstance, candidates: CandidateIndex) -> List[int]:
    tour = greedy_tour(instance, candidates)
    two_opt(tour, instance, max_passes=BOOTSTRAP_TWO_OPT_PASSES)
    return tour
