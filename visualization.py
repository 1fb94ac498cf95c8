# visualization.py
"""
Handles the visualization of the particle simulation using Pygame.

Rendering has no feedback into the physics: the visualizer only reads
particle positions and types.
"""
import logging
from typing import Optional

import pygame

from constants import BACKGROUND_COLOR, FPS, PARTICLE_COLORS, WINDOW_TITLE
from parameters import SimulationParameters
from particle import ParticleSystem, ParticleType

# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, params: SimulationParameters, colors: Optional[list] = None):
#     - Inputs:
#       - params: Supplies the window size and particle size.
#       - colors: Optional list of RGB color lists (e.g., [[255,0,0], ...])
#         from the configuration, one per ParticleType. If None, the
#         default palette is used.
#     - Outputs: None
#     - Side Effects: Initializes Pygame and creates a display surface.
#
#   - draw(self, particles: ParticleSystem) -> bool:
#     - Inputs:
#       - particles: The ParticleSystem object containing the current state.
#     - Outputs:
#       - bool: False if the user has quit, True otherwise.
#     - Side Effects: Renders particles to the screen and handles Pygame events.


class Visualizer:
    """
    Renders the particle system state in a Pygame window.
    """
    def __init__(self, params: SimulationParameters, colors: Optional[list] = None, fps: int = FPS):
        """
        Initializes Pygame and the display window.
        """
        pygame.init()

        self.width = params.screen_width
        self.height = params.screen_height
        self.particle_size = params.particle_size
        self.screen = pygame.display.set_mode((self.width, self.height))
        pygame.display.set_caption(WINDOW_TITLE)

        self.clock = pygame.time.Clock()
        self.fps_cap = fps

        # Load or fall back to the default color for each particle type
        self.colors = self._initialize_colors(colors)

        logging.info(f"Visualizer initialized with Pygame display ({self.width}x{self.height}).")

    def _initialize_colors(self, config_colors: Optional[list]) -> list:
        """Initializes particle colors from config, falling back to the default palette."""
        particle_types = len(ParticleType)
        default_colors = [pygame.Color(rgb) for rgb in PARTICLE_COLORS]

        if not config_colors:
            logging.info("No colors found in config. Using default palette.")
            return default_colors

        final_colors = []
        try:
            for rgb in config_colors:
                final_colors.append(pygame.Color(*rgb))
        except (ValueError, TypeError) as e:
            logging.error(f"Could not parse colors from config due to invalid format: {e}. Falling back to default palette.")
            return default_colors

        num_loaded = len(final_colors)
        if num_loaded < particle_types:
            logging.warning(
                f"Config provides {num_loaded} colors, but {particle_types} are needed. "
                f"Using the default palette for the remaining {particle_types - num_loaded}."
            )
            final_colors.extend(default_colors[num_loaded:])
        elif num_loaded > particle_types:
            logging.warning(
                f"Config provides {num_loaded} colors, but only {particle_types} are needed. "
                "Ignoring excess colors."
            )
            final_colors = final_colors[:particle_types]
        else:
            logging.info(f"Successfully loaded {num_loaded} particle colors from configuration.")

        return final_colors

    @property
    def fps(self) -> float:
        """Frame rate measured by the Pygame clock over the last few frames."""
        return self.clock.get_fps()

    def draw(self, particles: ParticleSystem) -> bool:
        """
        Draws all particles and handles events.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False

        self.screen.fill(BACKGROUND_COLOR)

        size = self.particle_size
        for i in range(particles.particle_count):
            pos = particles.positions[i]
            color = self.colors[particles.types[i]]
            # Position is the top-left corner of the particle's bounding box
            pygame.draw.ellipse(self.screen, color, pygame.Rect(pos[0], pos[1], size, size))

        pygame.display.flip()
        self.clock.tick(self.fps_cap)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.quit()
