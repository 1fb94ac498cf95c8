import pytest

pygame = pytest.importorskip("pygame")

from constants import PARTICLE_COLORS
from parameters import SimulationParameters
from particle import ParticleSystem
from visualization import Visualizer


def make_visualizer():
    # Bypass __init__ so no display is needed
    return Visualizer.__new__(Visualizer)


def test_default_palette_when_config_has_none():
    colors = make_visualizer()._initialize_colors(None)

    assert [tuple(c)[:3] for c in colors] == PARTICLE_COLORS


def test_short_config_palette_is_padded():
    colors = make_visualizer()._initialize_colors([[1, 2, 3]])

    assert len(colors) == 6
    assert tuple(colors[0])[:3] == (1, 2, 3)
    assert tuple(colors[5])[:3] == PARTICLE_COLORS[5]


def test_long_config_palette_is_truncated():
    colors = make_visualizer()._initialize_colors([[10, 10, 10]] * 8)

    assert len(colors) == 6


def test_malformed_palette_falls_back():
    colors = make_visualizer()._initialize_colors([[1, 2, 3], 7])

    assert [tuple(c)[:3] for c in colors] == PARTICLE_COLORS


@pytest.fixture
def dummy_display(monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")


def test_draw_renders_and_stops_on_quit(dummy_display):
    params = SimulationParameters(screen_width=200, screen_height=100, particle_count=5, seed=3)
    particles = ParticleSystem(params)
    visualizer = Visualizer(params, fps=0)
    try:
        assert visualizer.screen.get_size() == (200, 100)
        assert visualizer.draw(particles) is True
        assert visualizer.fps >= 0.0

        pygame.event.post(pygame.event.Event(pygame.QUIT))
        assert visualizer.draw(particles) is False
    finally:
        visualizer.close()


def test_draw_stops_on_escape(dummy_display):
    params = SimulationParameters(screen_width=200, screen_height=100, particle_count=0)
    visualizer = Visualizer(params, fps=0)
    try:
        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
        assert visualizer.draw(ParticleSystem(params)) is False
    finally:
        visualizer.close()
