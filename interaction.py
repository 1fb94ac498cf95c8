# interaction.py
"""
The pairwise force model.

Two particles interact through one of three distance regimes:
- short range: universal repulsion, symmetric in both particles;
- interaction range: typed attraction/repulsion read from the interaction
  matrix, each particle governed by its own row (not symmetric);
- beyond range: no force.

The scalar kernel is compiled with Numba so the batch pair scan in
simulation.py and the single-pair API below produce identical floats.
"""
import logging
import math
from enum import Enum
from typing import Tuple, TYPE_CHECKING

import numpy as np
from numba import jit

from particle import Particle

if TYPE_CHECKING:
    from parameters import SimulationParameters

# --- Data Contracts ---
#
# compute_force_pair(p1: Particle, p2: Particle, params: SimulationParameters)
#     -> Tuple[np.ndarray, np.ndarray]:
#   - Inputs: two particles and the run's parameters.
#   - Outputs: (force_on_p1, force_on_p2), each a float64 array of shape (2,).
#   - Side Effects: None.
#   - Invariants: both forces lie on the axis joining the particles. Exactly
#     coincident particles yield two zero vectors.


class Regime(Enum):
    """Distance bracket deciding which force formula applies."""
    REPULSION = "repulsion"
    INTERACTION = "interaction"
    NONE = "none"


@jit(nopython=True)
def force_pair_numba(
    x1, y1, type1, x2, y2, type2, interaction_matrix,
    repulsion_distance, interaction_distance, repulsion_strength,
    force_scaling_factor, min_distance
):
    """
    Numba-jitted pair force.

    Returns (f1x, f1y, f2x, f2y, degenerate). `degenerate` is True when the
    positions coincide, in which case the direction is undefined and both
    forces are zero.
    """
    dx = x2 - x1
    dy = y2 - y1
    distance = math.sqrt(dx * dx + dy * dy)

    if distance == 0.0:
        return 0.0, 0.0, 0.0, 0.0, True

    # Direction is FROM p1 TO p2
    normalized_dx = dx / distance
    normalized_dy = dy / distance

    if distance < repulsion_distance:
        # Clamp keeps the 1/r term finite for near-coincident pairs.
        magnitude = -repulsion_strength / max(distance, min_distance) * force_scaling_factor
        return (
            magnitude * normalized_dx, magnitude * normalized_dy,
            -magnitude * normalized_dx, -magnitude * normalized_dy,
            False
        )

    if distance < interaction_distance:
        coefficient_p1 = interaction_matrix[type1, type2]
        coefficient_p2 = interaction_matrix[type2, type1]

        magnitude_p1 = coefficient_p1 / (distance * distance) * force_scaling_factor
        magnitude_p2 = coefficient_p2 / (distance * distance) * force_scaling_factor
        return (
            magnitude_p1 * normalized_dx, magnitude_p1 * normalized_dy,
            -magnitude_p2 * normalized_dx, -magnitude_p2 * normalized_dy,
            False
        )

    return 0.0, 0.0, 0.0, 0.0, False


def interaction_regime(distance: float, params: "SimulationParameters") -> Regime:
    """Returns the regime for a separation of `distance`. Brackets are half-open."""
    if distance < params.repulsion_distance:
        return Regime.REPULSION
    if distance < params.interaction_distance:
        return Regime.INTERACTION
    return Regime.NONE


def compute_force_pair(
    p1: Particle, p2: Particle, params: "SimulationParameters"
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Computes the forces two particles exert on each other.

    Args:
        p1 (Particle): The first particle.
        p2 (Particle): The second particle.
        params (SimulationParameters): Distances, strengths and the matrix.

    Returns:
        Tuple[np.ndarray, np.ndarray]: The force on p1 and the force on p2.
    """
    f1x, f1y, f2x, f2y, degenerate = force_pair_numba(
        p1.position[0], p1.position[1], int(p1.particle_type),
        p2.position[0], p2.position[1], int(p2.particle_type),
        params.interaction_matrix,
        params.repulsion_distance, params.interaction_distance,
        params.repulsion_strength, params.force_scaling_factor,
        params.min_distance
    )
    if degenerate:
        logging.debug(f"Coincident particles at {p1.position.tolist()}; pair skipped.")
    return np.array([f1x, f1y]), np.array([f2x, f2y])
