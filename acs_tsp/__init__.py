from .tsp import TSPInstance
from .aco_base import ACOConfig, ACOResult
from .candidates import CandidateIndex
from .construction import greedy_tour, refined_greedy_tour
from .local_search import two_opt, or_opt
from .pheromone import PheromoneField
from .acs import AntColonySystem
from .experiments import run_parameter_sweep, run_repeated_trials, run_benchmarks
