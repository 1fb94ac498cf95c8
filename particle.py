# particle.py
"""
Manages the state of all particles in the simulation.

This module defines the closed set of particle types, the per-particle
state (position, velocity, type) with its integration and boundary
policy, and the ParticleSystem population that stores everything in
NumPy arrays.
"""
import logging
from enum import IntEnum
from typing import Iterator, Optional, TYPE_CHECKING

import numpy as np
from numba import jit

if TYPE_CHECKING:
    from parameters import SimulationParameters

# --- Data Contracts ---
#
# class Particle:
#   - apply_force(self, force) -> None:
#     - Side Effects: velocity += force. No clamping.
#   - update(self, params: SimulationParameters) -> None:
#     - Side Effects: damps velocity, integrates position, reflects off
#       the domain edges. In that order.
#     - Invariants: afterwards 0 <= position <= params.bounds per axis.
#
# class ParticleSystem:
#   - __init__(self, params: SimulationParameters, rng=None):
#     - Side Effects: Initializes internal NumPy arrays for particle state.
#     - Invariants:
#       - self.positions is a NumPy array of shape (N, 2) of dtype float64.
#       - self.velocities is a NumPy array of shape (N, 2) of dtype float64.
#       - self.types is a NumPy array of shape (N,) of dtype int32, every
#         value a valid ParticleType.
#       - self.particles[i] views row i of the arrays above.


class ParticleType(IntEnum):
    """The closed set of particle types. Values index the interaction matrix."""
    RED = 0
    BLUE = 1
    GREEN = 2
    YELLOW = 3
    PURPLE = 4
    ORANGE = 5


@jit(nopython=True)
def update_state_numba(position, velocity, damping_factor, max_x, max_y):
    """
    Numba-jitted damp -> integrate -> reflect for one particle.

    Mutates `position` and `velocity` (length-2 float64 arrays) in place.
    Each bound is corrected at most once per call; an overshoot past both
    edges in one step is not resolved further.
    """
    velocity[0] *= damping_factor
    velocity[1] *= damping_factor

    position[0] += velocity[0]
    position[1] += velocity[1]

    if position[0] <= 0.0:
        position[0] = 0.0
        velocity[0] = -velocity[0]
    if position[0] >= max_x:
        position[0] = max_x
        velocity[0] = -velocity[0]
    if position[1] <= 0.0:
        position[1] = 0.0
        velocity[1] = -velocity[1]
    if position[1] >= max_y:
        position[1] = max_y
        velocity[1] = -velocity[1]


class Particle:
    """
    The state of a single particle.

    A standalone particle owns copies of its vectors. Particles handed out by
    a ParticleSystem hold views into its arrays instead, so all mutation goes
    straight to the shared state.
    """
    __slots__ = ("position", "velocity", "particle_type")

    def __init__(self, position, velocity=None, particle_type: int = ParticleType.RED):
        self.position = np.array(position, dtype=np.float64)
        if velocity is None:
            velocity = np.zeros(2, dtype=np.float64)
        self.velocity = np.array(velocity, dtype=np.float64)
        if self.position.shape != (2,) or self.velocity.shape != (2,):
            raise ValueError(
                f"Particle position and velocity must be 2D vectors, got shapes "
                f"{self.position.shape} and {self.velocity.shape}."
            )
        # Raises ValueError for anything outside the closed type set.
        self.particle_type = ParticleType(int(particle_type))

    @classmethod
    def _view(cls, position: np.ndarray, velocity: np.ndarray, particle_type: int) -> "Particle":
        """Wraps existing state rows without copying them."""
        particle = cls.__new__(cls)
        particle.position = position
        particle.velocity = velocity
        particle.particle_type = ParticleType(int(particle_type))
        return particle

    def apply_force(self, force) -> None:
        """Adds `force` to the velocity."""
        self.velocity += force

    def update(self, params: "SimulationParameters") -> None:
        """Advances this particle by one step. Call after all forces are applied."""
        max_x, max_y = params.bounds
        update_state_numba(self.position, self.velocity, params.damping_factor, max_x, max_y)

    def __repr__(self) -> str:
        return (
            f"Particle(position={self.position.tolist()}, "
            f"velocity={self.velocity.tolist()}, type={self.particle_type.name})"
        )


class ParticleSystem:
    """
    A container for all particles, managing their state via NumPy arrays.
    """
    def __init__(self, params: "SimulationParameters", rng: Optional[np.random.Generator] = None):
        """
        Initializes the particle system with random positions and types.

        Args:
            params (SimulationParameters): Simulation parameters.
            rng (Optional[np.random.Generator]): Source of randomness. When
                omitted, a generator seeded from `params.seed` is used.
        """
        self.particle_count = params.particle_count
        self.particle_types = len(ParticleType)
        self.seed = params.seed

        # All randomness for initial placement goes through a single RNG.
        self.rng = rng if rng is not None else np.random.default_rng(self.seed)

        self.positions = self.rng.uniform(
            low=[0, 0],
            high=[params.screen_width, params.screen_height],
            size=(self.particle_count, 2)
        )
        self.velocities = np.zeros((self.particle_count, 2), dtype=np.float64)
        self.types = self.rng.integers(
            low=0,
            high=self.particle_types,
            size=self.particle_count,
            dtype=np.int32
        )
        self.particles = self._build_particles()

        logging.info(
            f"ParticleSystem initialized with {self.particle_count} "
            f"particles of {self.particle_types} types."
        )
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {self.positions.shape}, "
            f"Velocities shape: {self.velocities.shape}, "
            f"Types shape: {self.types.shape}"
        )

    @classmethod
    def from_arrays(cls, positions, types, velocities=None) -> "ParticleSystem":
        """
        Builds a population from explicit state instead of random placement.

        Raises:
            ValueError: If the array shapes disagree or a type is out of range.
        """
        system = cls.__new__(cls)
        system.positions = np.array(positions, dtype=np.float64).reshape(-1, 2)
        system.particle_count = system.positions.shape[0]
        system.particle_types = len(ParticleType)
        system.seed = None
        system.rng = None
        if velocities is None:
            system.velocities = np.zeros_like(system.positions)
        else:
            system.velocities = np.array(velocities, dtype=np.float64).reshape(-1, 2)
        system.types = np.array(types, dtype=np.int32).reshape(-1)

        if system.velocities.shape != system.positions.shape or system.types.shape != (system.particle_count,):
            msg = (
                f"State arrays disagree: positions {system.positions.shape}, "
                f"velocities {system.velocities.shape}, types {system.types.shape}."
            )
            logging.critical(msg)
            raise ValueError(msg)

        system._validate_types()
        system.particles = system._build_particles()
        logging.debug(f"ParticleSystem built from explicit state with {system.particle_count} particles.")
        return system

    def _validate_types(self) -> None:
        """Every type must index the interaction matrix."""
        invalid = (self.types < 0) | (self.types >= self.particle_types)
        if np.any(invalid):
            msg = (
                f"Invariant violation: particle type indices "
                f"{sorted(set(self.types[invalid].tolist()))} are outside the "
                f"{self.particle_types} known particle types."
            )
            logging.critical(msg)
            raise ValueError(msg)

    def _build_particles(self) -> list:
        # Rows of a C-contiguous (N, 2) array are views, not copies.
        return [
            Particle._view(self.positions[i], self.velocities[i], self.types[i])
            for i in range(self.particle_count)
        ]

    def __len__(self) -> int:
        return self.particle_count

    def __iter__(self) -> Iterator[Particle]:
        return iter(self.particles)

    def __getitem__(self, index: int) -> Particle:
        return self.particles[index]
