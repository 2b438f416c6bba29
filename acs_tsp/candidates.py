from __future__ import annotations
from typing import Sequence, Tuple

import numpy as np

from .aco_base import DEFAULT_CANDIDATES
from .tsp import TSPInstance


class CandidateIndex:
    """Per-city shortlist of the k nearest other cities, nearest first.

    Equal distances keep ascending city order, so the index is deterministic
    for a given instance. Read-only once built.
    """

    def __init__(self, lists: Sequence[Sequence[int]], k: int):
        self._lists: Tuple[Tuple[int, ...], ...] = tuple(tuple(int(c) for c in cities) for cities in lists)
        self.k = k

    @classmethod
    def build(cls, instance: TSPInstance, k: int = DEFAULT_CANDIDATES) -> "CandidateIndex":
        n = instance.n_cities()
        k = min(k, max(n - 1, 0))
        lists = []
        for i in range(n):
            if k == 0:
                lists.append([])
                continue
            row = instance.distances_from(i)
            row[i] = np.inf
            # every city tied with the k-th distance survives the cut
            kth = np.partition(row, k - 1)[k - 1]
            near = np.flatnonzero(row <= kth)
            near = near[near != i]
            order = near[np.lexsort((near, row[near]))]
            lists.append(order[:k].tolist())
        return cls(lists, k)

    def __getitem__(self, city: int) -> Tuple[int, ...]:
        return self._lists[city]

    def __len__(self) -> int:
        return len(self._lists)
