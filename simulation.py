# simulation.py
"""
Handles the core simulation loop and physics calculations.

This module defines the Simulation class, which is responsible for
advancing the state of the particle system by one time step. Each step
runs in two passes: every unordered pair is scanned once and its forces
are written into a per-particle accumulator, then every particle applies
its accumulated force and integrates.
"""
import logging

import numpy as np
from numba import jit

from interaction import force_pair_numba
from parameters import SimulationParameters
from particle import ParticleSystem, update_state_numba

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, particles: ParticleSystem, params: SimulationParameters):
#     - Inputs:
#       - particles: An initialized ParticleSystem object.
#       - params: The immutable parameters for this run.
#     - Outputs: None
#     - Side Effects: Stores references to particles and parameters.
#
#   - step(self) -> None:
#     - Inputs: None (operates on internal state).
#     - Outputs: None
#     - Side Effects: Modifies the positions and velocities of the internal
#       ParticleSystem.
#     - Invariants: Particle count remains constant. Particle positions stay
#       within [0, width - size] x [0, height - size]. All state is finite,
#       otherwise RuntimeError is raised.


@jit(nopython=True)
def _calculate_forces_numba(
    positions, types, interaction_matrix,
    repulsion_distance, interaction_distance, repulsion_strength,
    force_scaling_factor, min_distance
):
    """
    Numba-jitted brute-force scan over every unordered pair.

    Only reads particle state. Returns the accumulated force per particle
    and the number of coincident pairs that were skipped.
    """
    particle_count = positions.shape[0]
    total_force = np.zeros_like(positions)
    degenerate_pairs = 0

    for i in range(particle_count):
        for j in range(i + 1, particle_count):
            f1x, f1y, f2x, f2y, degenerate = force_pair_numba(
                positions[i, 0], positions[i, 1], types[i],
                positions[j, 0], positions[j, 1], types[j],
                interaction_matrix,
                repulsion_distance, interaction_distance, repulsion_strength,
                force_scaling_factor, min_distance
            )
            if degenerate:
                degenerate_pairs += 1
                continue
            total_force[i, 0] += f1x
            total_force[i, 1] += f1y
            total_force[j, 0] += f2x
            total_force[j, 1] += f2y

    return total_force, degenerate_pairs


@jit(nopython=True)
def _update_particles_numba(positions, velocities, damping_factor, max_x, max_y):
    """Numba-jitted update pass. Each particle only touches its own row."""
    for i in range(positions.shape[0]):
        update_state_numba(positions[i], velocities[i], damping_factor, max_x, max_y)


class Simulation:
    """
    Manages the simulation loop and physics calculations.
    """
    def __init__(self, particles: ParticleSystem, params: SimulationParameters):
        """
        Initializes the simulation environment.

        Args:
            particles (ParticleSystem): The particle system to simulate.
            params (SimulationParameters): Simulation parameters.
        """
        self.particles = particles
        self.params = params
        self.step_count = 0
        self.max_x, self.max_y = params.bounds

        logging.info("Simulation logic initialized.")
        logging.info(
            f"Brute-force pair scan over {particles.particle_count} particles "
            f"({particles.particle_count * (particles.particle_count - 1) // 2} pairs per step)."
        )

    @property
    def interaction_matrix(self) -> np.ndarray:
        """The run's interaction matrix (read-only)."""
        return self.params.interaction_matrix

    def step(self):
        """
        Executes one time step of the simulation.

        Raises:
            RuntimeError: If any particle ends the step with a non-finite
                position or velocity.
        """
        params = self.params

        # 1. Accumulate all pair forces before anything moves
        total_force, degenerate_pairs = _calculate_forces_numba(
            self.particles.positions, self.particles.types, params.interaction_matrix,
            params.repulsion_distance, params.interaction_distance,
            params.repulsion_strength, params.force_scaling_factor,
            params.min_distance
        )
        if degenerate_pairs:
            logging.warning(
                f"Step {self.step_count + 1}: {degenerate_pairs} pair(s) of coincident "
                f"particles exerted no force."
            )

        # 2. Apply accumulated forces to velocities
        self.particles.velocities += total_force

        # 3. Damp, integrate and reflect every particle
        _update_particles_numba(
            self.particles.positions, self.particles.velocities,
            params.damping_factor, self.max_x, self.max_y
        )

        self.step_count += 1
        self._check_state()

    def run(self, steps: int) -> None:
        """Advances the simulation by `steps` steps without rendering."""
        for _ in range(steps):
            self.step()

    def average_speed(self) -> float:
        """Mean velocity magnitude across the population."""
        if self.particles.particle_count == 0:
            return 0.0
        return float(np.mean(np.linalg.norm(self.particles.velocities, axis=1)))

    def _check_state(self) -> None:
        finite = (
            np.isfinite(self.particles.positions).all(axis=1)
            & np.isfinite(self.particles.velocities).all(axis=1)
        )
        if not finite.all():
            bad = np.flatnonzero(~finite)
            msg = (
                f"Invariant violation at step {self.step_count}: non-finite state for "
                f"particle(s) {bad[:10].tolist()}{' ...' if bad.size > 10 else ''}. "
                f"Halting simulation."
            )
            logging.critical(msg)
            raise RuntimeError(msg)
