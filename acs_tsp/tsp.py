from __future__ import annotations
import logging
import os
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .aco_base import FlatMatrix

logger = logging.getLogger(__name__)

DENSE_DISTANCE_LIMIT = 5000


def _parse_float(token: str) -> float:
    try:
        return float(token)
    except ValueError:
        return 0.0


@dataclass
class TSPInstance:
    coords: List[Tuple[float, float]]
    name: str = "euclidean_tsp"
    _xy: np.ndarray = field(init=False, repr=False, compare=False)
    _dist: Optional[FlatMatrix] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self.coords = [(float(x), float(y)) for x, y in self.coords]
        self._xy = np.asarray(self.coords, dtype=float).reshape(-1, 2)
        n = len(self.coords)
        # above the limit distances are computed per call instead of stored
        self._dist = None
        if n <= DENSE_DISTANCE_LIMIT:
            self._dist = FlatMatrix(n)
            for i in range(n):
                self._dist.set_row(i, self.distances_from(i))

    @staticmethod
    def random_euclidean(n: int, seed: Optional[int] = None, square_size: float = 100.0, name: str = "random_euclidean"):
        rng = random.Random(seed)
        coords = [(rng.uniform(0, square_size), rng.uniform(0, square_size)) for _ in range(n)]
        return TSPInstance(coords=coords, name=name)

    @classmethod
    def from_file(cls, path: str, name: Optional[str] = None) -> "TSPInstance":
        """Load ``<count>`` followed by one ``x y`` pair per line.

        Unparseable numbers read as 0.0 and lines with fewer than two fields
        are skipped. When the declared count disagrees with the parsed lines
        the parsed lines win.
        """
        with open(path) as f:
            lines = f.read().splitlines()

        declared = 0
        if lines:
            try:
                declared = int(lines[0].strip())
            except ValueError:
                declared = 0

        coords = []
        for line in lines[1:]:
            parts = line.split()
            if len(parts) >= 2:
                coords.append((_parse_float(parts[0]), _parse_float(parts[1])))

        if len(coords) != declared:
            logger.warning("Expected %d points in %s, found %d", declared, path, len(coords))
        return cls(coords=coords, name=name or os.path.basename(path))

    def n_cities(self) -> int:
        return len(self.coords)

    def distances_from(self, i: int) -> np.ndarray:
        """Distances from city i to every city, as one numpy row."""
        delta = self._xy - self._xy[i]
        return np.hypot(delta[:, 0], delta[:, 1])

    def distance(self, i: int, j: int) -> float:
        if self._dist is not None:
            return self._dist.get(i, j)
        n = len(self.coords)
        if not (0 <= i < n and 0 <= j < n):
            raise IndexError(f"({i}, {j}) out of range for {n} cities")
        (x1, y1), (x2, y2) = self.coords[i], self.coords[j]
        return float(np.hypot(x2 - x1, y2 - y1))

    def distance_matrix(self) -> List[List[float]]:
        return [self.distances_from(i).tolist() for i in range(self.n_cities())]

    def tour_length(self, tour: Sequence[int]) -> float:
        n = len(tour)
        dist = 0.0
        for k in range(n):
            i, j = tour[k], tour[(k + 1) % n]
            dist += self.distance(i, j)
        return dist
