# parameters.py
"""
Immutable simulation parameters.

The physics core never reads module-level globals: every step receives a
SimulationParameters value built once at startup from the
`simulation_parameters` section of config.json.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import numpy as np

from constants import (
    DEFAULT_SCREEN_WIDTH, DEFAULT_SCREEN_HEIGHT, DEFAULT_PARTICLE_SIZE,
    DEFAULT_PARTICLE_COUNT, DEFAULT_INTERACTION_DISTANCE,
    DEFAULT_REPULSION_DISTANCE, DEFAULT_REPULSION_STRENGTH,
    DEFAULT_DAMPING_FACTOR, DEFAULT_FORCE_SCALING_FACTOR,
    DEFAULT_MIN_DISTANCE, DEFAULT_INTERACTION_MATRIX
)
from particle import ParticleType

# --- Data Contracts ---
#
# SimulationParameters.from_dict(params: Dict[str, Any]) -> SimulationParameters:
#   - Inputs:
#     - params: The "simulation_parameters" section of config.json. Every
#       key is optional:
#       - "screen_width": int, "screen_height": int
#       - "particle_size": float, "particle_count": int
#       - "interaction_distance": float, "repulsion_distance": float
#       - "repulsion_strength": float, "damping_factor": float
#       - "force_scaling_factor": float, "min_distance": float
#       - "seed": Optional[int]
#       - "particle_types": int (must match the ParticleType set)
#       - "interaction_matrix": List[List[float]]
#   - Outputs: A validated, frozen SimulationParameters.
#   - Invariants: interaction_matrix is a read-only float64 array of shape
#     (len(ParticleType), len(ParticleType)).


_FLOAT_FIELDS = (
    'particle_size', 'interaction_distance', 'repulsion_distance', 'repulsion_strength',
    'damping_factor', 'force_scaling_factor', 'min_distance'
)


def _is_int(value: Any) -> bool:
    # bool is an int subclass but never a valid count or seed
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _config_error(msg: str) -> ValueError:
    logging.critical(msg)
    return ValueError(msg)


@dataclass(frozen=True, eq=False)
class SimulationParameters:
    """Physics and population settings for one simulation run."""
    screen_width: int = DEFAULT_SCREEN_WIDTH
    screen_height: int = DEFAULT_SCREEN_HEIGHT
    particle_size: float = DEFAULT_PARTICLE_SIZE
    particle_count: int = DEFAULT_PARTICLE_COUNT
    interaction_distance: float = DEFAULT_INTERACTION_DISTANCE
    repulsion_distance: float = DEFAULT_REPULSION_DISTANCE
    repulsion_strength: float = DEFAULT_REPULSION_STRENGTH
    damping_factor: float = DEFAULT_DAMPING_FACTOR
    force_scaling_factor: float = DEFAULT_FORCE_SCALING_FACTOR
    min_distance: float = DEFAULT_MIN_DISTANCE
    seed: Optional[int] = None
    interaction_matrix: Any = field(default_factory=lambda: DEFAULT_INTERACTION_MATRIX)

    def __post_init__(self):
        for name in _FLOAT_FIELDS:
            object.__setattr__(self, name, float(getattr(self, name)))
        matrix = np.array(self.interaction_matrix, dtype=np.float64)
        matrix.setflags(write=False)
        object.__setattr__(self, 'interaction_matrix', matrix)
        self._validate()

    @classmethod
    def from_dict(cls, params: Dict[str, Any]) -> "SimulationParameters":
        """Builds parameters from a config section, using defaults for missing keys."""
        num_types = params.get('particle_types', len(ParticleType))
        if num_types != len(ParticleType):
            raise _config_error(
                f"Configuration error: particle_types is {num_types}, but the "
                f"simulation defines exactly {len(ParticleType)} particle types."
            )

        known = {f for f in cls.__dataclass_fields__}
        unknown = set(params) - known - {'particle_types'}
        if unknown:
            logging.warning(f"Ignoring unknown simulation parameters: {sorted(unknown)}")

        return cls(**{key: value for key, value in params.items() if key in known})

    def _validate(self) -> None:
        # Rule 7: Enforce data contracts. Validate config on initialization.
        num_types = len(ParticleType)
        matrix_shape = self.interaction_matrix.shape
        if matrix_shape != (num_types, num_types):
            raise _config_error(
                f"Configuration error: Interaction matrix shape {matrix_shape} "
                f"does not match the number of particle types ({num_types}). The matrix must be square "
                f"and its dimensions must equal the number of particle types."
            )
        if not np.all(np.isfinite(self.interaction_matrix)):
            raise _config_error("Configuration error: Interaction matrix contains non-finite values.")

        if not _is_int(self.particle_count):
            raise _config_error(
                f"Configuration error: particle_count must be an integer, got {self.particle_count!r}."
            )
        if self.seed is not None and not _is_int(self.seed):
            raise _config_error(f"Configuration error: seed must be an integer or null, got {self.seed!r}.")
        if self.particle_count < 0:
            raise _config_error(f"Configuration error: particle_count must be >= 0, got {self.particle_count}.")
        if self.particle_size < 0 or self.screen_width <= self.particle_size or self.screen_height <= self.particle_size:
            raise _config_error(
                f"Configuration error: screen {self.screen_width}x{self.screen_height} "
                f"cannot hold particles of size {self.particle_size}."
            )

        for name in _FLOAT_FIELDS:
            value = getattr(self, name)
            if not math.isfinite(value):
                raise _config_error(f"Configuration error: {name} must be finite, got {value}.")

        if not 0.0 < self.min_distance < self.repulsion_distance:
            raise _config_error(
                f"Configuration error: min_distance ({self.min_distance}) must be positive "
                f"and smaller than repulsion_distance ({self.repulsion_distance})."
            )
        if not 0.0 < self.damping_factor <= 1.0:
            raise _config_error(
                f"Configuration error: damping_factor must be in (0, 1], got {self.damping_factor}."
            )
        if self.repulsion_distance >= self.interaction_distance:
            logging.warning(
                f"repulsion_distance ({self.repulsion_distance}) >= interaction_distance "
                f"({self.interaction_distance}): typed interactions will never apply."
            )

    @property
    def bounds(self) -> Tuple[float, float]:
        """Largest allowed position on each axis."""
        return (
            float(self.screen_width - self.particle_size),
            float(self.screen_height - self.particle_size),
        )

    def as_dict(self) -> Dict[str, Any]:
        """Plain-Python copy of the parameters, suitable for logging or JSON."""
        data = {name: getattr(self, name) for name in self.__dataclass_fields__}
        data['interaction_matrix'] = self.interaction_matrix.tolist()
        return data
