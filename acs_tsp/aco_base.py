from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

import numpy as np

DEFAULT_CANDIDATES = 30


def argmax(items, key):
    best = None
    best_val = None
    for it in items:
        v = key(it)
        if best is None or v > best_val:
            best, best_val = it, v
    return best


class RandomSource(Protocol):
    """Uniform draws consumed by tour construction (random.Random satisfies it)."""

    def random(self) -> float: ...

    def randrange(self, stop: int) -> int: ...


class FlatMatrix:
    """Dense n x n matrix of floats stored row-major in one flat numpy array."""

    __slots__ = ("n", "_data")

    def __init__(self, n: int, fill: float = 0.0):
        self.n = n
        self._data = np.full(n * n, fill, dtype=np.float64)

    def _index(self, i: int, j: int) -> int:
        if not (0 <= i < self.n and 0 <= j < self.n):
            raise IndexError(f"({i}, {j}) out of range for {self.n}x{self.n} matrix")
        return i * self.n + j

    def get(self, i: int, j: int) -> float:
        return self._data.item(self._index(i, j))

    def set_symmetric(self, i: int, j: int, value: float) -> None:
        self._data[self._index(i, j)] = value
        self._data[self._index(j, i)] = value

    def set_row(self, i: int, values: np.ndarray) -> None:
        start = self._index(i, 0)
        self._data[start:start + self.n] = values

    def to_array(self) -> np.ndarray:
        return self._data.reshape(self.n, self.n).copy()


@dataclass
class ACOConfig:
    n_ants: int = 32
    n_iterations: int = 128
    q0: float = 0.9             # exploitation probability
    beta: float = 2.0           # heuristic influence
    rho: float = 0.1            # global evaporation rate
    phi: float = 0.1            # local pheromone decay (0<phi<=1)
    n_candidates: int = DEFAULT_CANDIDATES
    seed: Optional[int] = None

    def validate(self) -> "ACOConfig":
        if self.n_ants < 1:
            raise ValueError(f"n_ants must be >= 1, got {self.n_ants}")
        if self.n_iterations < 0:
            raise ValueError(f"n_iterations must be >= 0, got {self.n_iterations}")
        if not 0.0 <= self.q0 <= 1.0:
            raise ValueError(f"q0 must be in [0, 1], got {self.q0}")
        if self.beta < 0.0:
            raise ValueError(f"beta must be >= 0, got {self.beta}")
        for name in ("rho", "phi"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ValueError(f"{name} must be in (0, 1], got {value}")
        if self.n_candidates < 1:
            raise ValueError(f"n_candidates must be >= 1, got {self.n_candidates}")
        return self


@dataclass
class ACOResult:
    best_tour: List[int]
    best_length: float
    history_best_lengths: List[float]
    config: ACOConfig
    elapsed_sec: float


def positions_of(tour: Sequence[int]) -> List[int]:
    pos = [0] * len(tour)
    for idx, city in enumerate(tour):
        pos[city] = idx
    return pos
