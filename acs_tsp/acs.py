from __future__ import annotations
import logging
import math
import random
import time
from typing import List, Optional, Tuple

from .aco_base import ACOConfig, ACOResult, DEFAULT_CANDIDATES, RandomSource, argmax
from .candidates import CandidateIndex
from .construction import refined_greedy_tour
from .local_search import ANT_TWO_OPT_PASSES, TWO_OPT_WINDOW, or_opt, two_opt
from .pheromone import PheromoneField
from .tsp import TSPInstance

logger = logging.getLogger(__name__)


class AntColonySystem:
    """Ant Colony System (ACS) over candidate lists, with 2-opt and Or-opt refinement.

    Ants run one after another and apply their local pheromone updates as
    they go, so every ant sees the updates of the ants before it.
    """

    def __init__(self, instance: TSPInstance, n_ants: int, n_iterations: int, q0: float, beta: float,
                 *, rho: float = 0.1, phi: float = 0.1, n_candidates: int = DEFAULT_CANDIDATES,
                 rng: Optional[RandomSource] = None, seed: Optional[int] = None):
        self.instance = instance
        self.n = instance.n_cities()
        self.n_ants = n_ants
        self.n_iterations = n_iterations
        self.q0 = q0
        self.beta = beta
        self.rho = rho
        self.phi = phi
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)

        logger.debug("Precomputing candidate lists (top %d) for %d cities", n_candidates, self.n)
        self.candidates = CandidateIndex.build(instance, n_candidates)
        # (1/d)^beta per candidate slot; a coincident city is an infinitely strong pull
        self._eta: List[Tuple[float, ...]] = []
        for i in range(self.n):
            weights = []
            for j in self.candidates[i]:
                d = instance.distance(i, j)
                weights.append((1.0 / d) ** beta if d > 0 else math.inf)
            self._eta.append(tuple(weights))

        baseline = refined_greedy_tour(instance, self.candidates)
        baseline_len = instance.tour_length(baseline)
        self.tau0 = 1.0 / (self.n * baseline_len) if baseline_len > 0 else 1.0
        logger.info("Optimized baseline: %.2f, tau0: %.6e", baseline_len, self.tau0)
        self.n_candidates = n_candidates
        self._pheromone: Optional[PheromoneField] = None

        self.best_tour: List[int] = baseline
        self.best_score: float = baseline_len
        self.history: List[float] = []
        self.history_best_tours: List[List[int]] = []

    @classmethod
    def from_config(cls, instance: TSPInstance, cfg: ACOConfig, rng: Optional[RandomSource] = None) -> "AntColonySystem":
        cfg.validate()
        return cls(instance, cfg.n_ants, cfg.n_iterations, cfg.q0, cfg.beta,
                   rho=cfg.rho, phi=cfg.phi, n_candidates=cfg.n_candidates, rng=rng, seed=cfg.seed)

    @property
    def config(self) -> ACOConfig:
        return ACOConfig(n_ants=self.n_ants, n_iterations=self.n_iterations, q0=self.q0, beta=self.beta,
                         rho=self.rho, phi=self.phi, n_candidates=self.n_candidates, seed=self.seed)

    @property
    def pheromone(self) -> PheromoneField:
        # allocated on first use; a zero-iteration run never needs the n x n field
        if self._pheromone is None:
            self._pheromone = PheromoneField(self.n, self.tau0, rho=self.rho, phi=self.phi)
        return self._pheromone

    def _select_next_city(self, current: int, visited: List[bool]) -> int:
        options = [(c, w) for c, w in zip(self.candidates[current], self._eta[current]) if not visited[c]]
        if not options:
            return visited.index(False)

        tau = self.pheromone.get
        if self.rng.random() <= self.q0:
            best = argmax(options, key=lambda cw: tau(current, cw[0]) * cw[1])
            return best[0]

        weights = []
        total = 0.0
        for c, w in options:
            val = tau(current, c) * w
            weights.append((c, val))
            total += val
        if total == 0.0:
            return options[0][0]
        if math.isinf(total):
            return next(c for c, val in weights if math.isinf(val))
        r = self.rng.random() * total
        acc = 0.0
        for c, val in weights:
            acc += val
            if acc >= r:
                return c
        return weights[-1][0]

    def construct_tour(self) -> List[int]:
        n = self.n
        start = self.rng.randrange(n)
        tour = [start]
        visited = [False] * n
        visited[start] = True
        current = start
        for _ in range(n - 1):
            nxt = self._select_next_city(current, visited)
            visited[nxt] = True
            self.pheromone.local_update(current, nxt)
            tour.append(nxt)
            current = nxt
        self.pheromone.local_update(tour[-1], tour[0])
        return tour

    def _refine(self, tour: List[int]) -> None:
        two_opt(tour, self.instance, window=TWO_OPT_WINDOW, max_passes=ANT_TWO_OPT_PASSES)

    def run(self) -> ACOResult:
        logger.info("Starting ACS (n=%d, beta=%s, ants=%d, iterations=%d)",
                    self.n, self.beta, self.n_ants, self.n_iterations)
        start = time.time()
        self.history = []
        self.history_best_tours = []

        for it in range(self.n_iterations):
            iter_best_tour: Optional[List[int]] = None
            iter_best = math.inf
            for _ in range(self.n_ants):
                tour = self.construct_tour()
                self._refine(tour)
                score = self.instance.tour_length(tour)
                if score < iter_best:
                    iter_best_tour, iter_best = tour, score

            # only the iteration champion gets the expensive Or-opt pass
            if iter_best_tour is not None and or_opt(iter_best_tour, self.instance, self.candidates):
                self._refine(iter_best_tour)
                iter_best = self.instance.tour_length(iter_best_tour)

            if iter_best < self.best_score:
                self.best_score = iter_best
                self.best_tour = list(iter_best_tour)
                logger.debug("Iter %d: new record %.2f", it, self.best_score)

            self.pheromone.global_update(self.best_tour, self.best_score)
            self.history.append(self.best_score)
            self.history_best_tours.append(list(self.best_tour))

        elapsed = time.time() - start
        logger.info("Done in %.2fs. Best: %.2f", elapsed, self.best_score)
        return ACOResult(best_tour=list(self.best_tour), best_length=self.best_score,
                         history_best_lengths=list(self.history), config=self.config, elapsed_sec=elapsed)
