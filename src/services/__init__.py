"""Services package - color ordering, placement bookkeeping and the placement loop."""

from services.canvas import Canvas
from services.checkpoints import checkpoint_filename, checkpoint_indices
from services.color_space import (
    build_placement_sequence,
    enumerate_colors,
    shuffle_colors,
)
from services.distances import (
    available_distances,
    register_distance,
    resolve_distance,
)
from services.fitness import NO_NEIGHBOUR_FITNESS, FitnessEvaluator
from services.frontier import Frontier
from services.placement_engine import EngineState, PlacementEngine

__all__ = [
    'NO_NEIGHBOUR_FITNESS',
    'Canvas',
    'EngineState',
    'FitnessEvaluator',
    'Frontier',
    'PlacementEngine',
    'available_distances',
    'build_placement_sequence',
    'checkpoint_filename',
    'checkpoint_indices',
    'enumerate_colors',
    'register_distance',
    'resolve_distance',
    'shuffle_colors',
]
