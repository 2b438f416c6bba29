from __future__ import annotations
from typing import Sequence

import numpy as np

from .aco_base import FlatMatrix


class PheromoneField:
    """Symmetric pheromone matrix with the ACS local and global update rules."""

    def __init__(self, n: int, tau0: float, rho: float = 0.1, phi: float = 0.1):
        self.n = n
        self.tau0 = tau0
        self.rho = rho
        self.phi = phi
        self._tau = FlatMatrix(n, fill=tau0)

    def get(self, i: int, j: int) -> float:
        return self._tau.get(i, j)

    def local_update(self, u: int, v: int) -> None:
        """Decay edge (u, v) towards tau0 right after an ant crosses it."""
        value = (1.0 - self.phi) * self._tau.get(u, v) + self.phi * self.tau0
        self._tau.set_symmetric(u, v, value)

    def global_update(self, tour: Sequence[int], length: float) -> None:
        """Reinforce the edges of ``tour`` (the best tour so far) with 1/length."""
        deposit = 1.0 / length if length > 0 else 0.0
        n = len(tour)
        for k in range(n):
            u, v = tour[k], tour[(k + 1) % n]
            value = (1.0 - self.rho) * self._tau.get(u, v) + self.rho * deposit
            self._tau.set_symmetric(u, v, value)

    def to_array(self) -> np.ndarray:
        return self._tau.to_array()

    def is_symmetric(self) -> bool:
        tau = self.to_array()
        return bool(np.array_equal(tau, tau.T))
