# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They cover rendering properties and the default physics settings that
`config.json` falls back to when a key is not provided.
"""

# Visualization settings
WINDOW_TITLE = "Particle Life"
# Frame rate cap for the Pygame clock. 0 means uncapped.
FPS = 60
BACKGROUND_COLOR = (0, 0, 0) # Black

# One color per particle type, in ParticleType order.
PARTICLE_COLORS = [
    (255, 0, 0),     # Red
    (0, 0, 255),     # Blue
    (0, 255, 0),     # Green
    (255, 255, 0),   # Yellow
    (128, 0, 128),   # Purple
    (255, 166, 0)    # Orange
]

# --- Default Simulation Parameters ---
DEFAULT_SCREEN_WIDTH = 1920
DEFAULT_SCREEN_HEIGHT = 1080
DEFAULT_PARTICLE_SIZE = 10.0
DEFAULT_PARTICLE_COUNT = 250

DEFAULT_INTERACTION_DISTANCE = 500.0
DEFAULT_REPULSION_DISTANCE = 20.0
DEFAULT_REPULSION_STRENGTH = 0.05
DEFAULT_DAMPING_FACTOR = 0.98
DEFAULT_FORCE_SCALING_FACTOR = 10.0
# Distances below this are clamped in the repulsion formula.
DEFAULT_MIN_DISTANCE = 1e-6

# Row = type being acted on, column = type acting on it.
DEFAULT_INTERACTION_MATRIX = [
    # Red    Blue   Green  Yellow Purple Orange
    [ 0.9,  -0.5,   0.3,  -0.7,   0.6,  -0.4], # Red
    [ 0.4,   0.8,  -0.8,   0.2,  -0.6,   0.1], # Blue
    [-0.3,   0.6,   0.7,  -0.5,   0.2,  -0.4], # Green
    [ 0.5,  -0.2,   0.4,   0.9,  -0.8,   0.3], # Yellow
    [-0.6,   0.3,  -0.2,   0.7,   0.8,  -0.9], # Purple
    [ 0.2,  -0.4,   0.5,  -0.3,   0.1,   0.9], # Orange
]
