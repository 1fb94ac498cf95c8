import math

import numpy as np
import pytest

from interaction import Regime, compute_force_pair, interaction_regime
from parameters import SimulationParameters
from particle import ParticleType


def test_no_force_beyond_interaction_distance(params, make_particle):
    p1 = make_particle(0.0, 0.0)
    p2 = make_particle(600.0, 0.0, ParticleType.BLUE)

    f1, f2 = compute_force_pair(p1, p2, params)

    assert f1.tolist() == [0.0, 0.0]
    assert f2.tolist() == [0.0, 0.0]


def test_interaction_distance_is_exclusive(params, make_particle):
    p1 = make_particle(0.0, 0.0)
    p2 = make_particle(0.0, 500.0)

    f1, f2 = compute_force_pair(p1, p2, params)

    assert not f1.any()
    assert not f2.any()


def test_repulsion_pushes_both_apart(params, make_particle):
    p1 = make_particle(100.0, 100.0, ParticleType.GREEN)
    p2 = make_particle(103.0, 104.0, ParticleType.PURPLE)
    direction = np.array([0.6, 0.8])

    f1, f2 = compute_force_pair(p1, p2, params)

    assert np.dot(f1, direction) < 0
    assert np.dot(f2, direction) > 0
    assert np.linalg.norm(f1) == pytest.approx(0.05 / 5.0 * 10.0)
    assert np.linalg.norm(f2) == pytest.approx(0.1)
    np.testing.assert_allclose(f1, -f2)


def test_repulsion_ignores_type(params, make_particle):
    same = compute_force_pair(make_particle(0.0, 0.0), make_particle(5.0, 0.0), params)
    mixed = compute_force_pair(
        make_particle(0.0, 0.0, ParticleType.YELLOW),
        make_particle(5.0, 0.0, ParticleType.ORANGE),
        params
    )

    np.testing.assert_array_equal(same[0], mixed[0])
    np.testing.assert_array_equal(same[1], mixed[1])
    assert same[0][0] == pytest.approx(-0.1)


def test_same_type_attraction_at_distance_100(params, make_particle):
    p1 = make_particle(200.0, 300.0, ParticleType.RED)
    p2 = make_particle(300.0, 300.0, ParticleType.RED)
    expected = 0.9 / (100.0 * 100.0) * 10.0

    f1, f2 = compute_force_pair(p1, p2, params)

    assert f1[0] == expected
    assert f2[0] == -expected
    assert f1[1] == 0.0 and f2[1] == 0.0
    # Positive coefficient pulls the particles together
    assert f1[0] > 0 and f2[0] < 0


def test_interaction_uses_each_particles_own_row(params, make_particle):
    red = make_particle(0.0, 0.0, ParticleType.RED)
    blue = make_particle(0.0, 250.0, ParticleType.BLUE)
    matrix = params.interaction_matrix
    assert matrix[ParticleType.RED, ParticleType.BLUE] != matrix[ParticleType.BLUE, ParticleType.RED]

    f_red, f_blue = compute_force_pair(red, blue, params)

    assert f_red[1] == -0.5 / (250.0 * 250.0) * 10.0
    assert f_blue[1] == -(0.4 / (250.0 * 250.0) * 10.0)
    # Red is pushed away from blue while blue is pulled toward red
    assert f_red[1] < 0 and f_blue[1] < 0


def test_swapping_arguments_swaps_forces(params, make_particle):
    red = make_particle(10.0, 10.0, ParticleType.RED)
    green = make_particle(130.0, 60.0, ParticleType.GREEN)

    f_red, f_green = compute_force_pair(red, green, params)
    g_green, g_red = compute_force_pair(green, red, params)

    np.testing.assert_allclose(f_red, g_red)
    np.testing.assert_allclose(f_green, g_green)


def test_repulsion_distance_starts_interaction_regime(params, make_particle):
    red = make_particle(0.0, 0.0, ParticleType.RED)
    blue = make_particle(20.0, 0.0, ParticleType.BLUE)

    f_red, f_blue = compute_force_pair(red, blue, params)

    assert f_red[0] == -0.5 / (20.0 * 20.0) * 10.0
    assert f_blue[0] == -(0.4 / (20.0 * 20.0) * 10.0)


def test_coincident_particles_exert_no_force(params, make_particle):
    p1 = make_particle(50.0, 50.0)
    p2 = make_particle(50.0, 50.0, ParticleType.BLUE)

    f1, f2 = compute_force_pair(p1, p2, params)

    assert f1.tolist() == [0.0, 0.0]
    assert f2.tolist() == [0.0, 0.0]


def test_near_coincident_repulsion_is_clamped(params, make_particle):
    p1 = make_particle(50.0, 50.0)
    p2 = make_particle(50.0 + 1e-9, 50.0)

    f1, f2 = compute_force_pair(p1, p2, params)

    assert np.all(np.isfinite(f1)) and np.all(np.isfinite(f2))
    assert f1[0] == pytest.approx(-params.repulsion_strength / params.min_distance * 10.0)
    assert f2[0] == pytest.approx(-f1[0])


def test_force_pair_does_not_mutate_particles(params, make_particle):
    p1 = make_particle(10.0, 20.0, vx=1.0)
    p2 = make_particle(40.0, 60.0, ParticleType.ORANGE)

    compute_force_pair(p1, p2, params)

    assert p1.position.tolist() == [10.0, 20.0]
    assert p1.velocity.tolist() == [1.0, 0.0]
    assert p2.position.tolist() == [40.0, 60.0]


def test_custom_parameters_change_the_regimes(make_particle):
    params = SimulationParameters(interaction_distance=50.0, repulsion_distance=5.0, force_scaling_factor=1.0)
    p1 = make_particle(0.0, 0.0)
    p2 = make_particle(60.0, 0.0)
    p3 = make_particle(10.0, 0.0)

    assert not compute_force_pair(p1, p2, params)[0].any()
    f1, _ = compute_force_pair(p1, p3, params)
    assert f1[0] == 0.9 / (10.0 * 10.0) * 1.0


@pytest.mark.parametrize("distance, regime", [
    (0.0, Regime.REPULSION),
    (19.999, Regime.REPULSION),
    (20.0, Regime.INTERACTION),
    (499.999, Regime.INTERACTION),
    (500.0, Regime.NONE),
    (math.inf, Regime.NONE),
])
def test_interaction_regime_brackets(params, distance, regime):
    assert interaction_regime(distance, params) is regime


@pytest.mark.parametrize("distance", [1.0, 19.999999, 20.0, 20.000001, 499.999999, 500.0, 500.000001, 800.0])
def test_interaction_regime_agrees_with_force_kernel(params, make_particle, distance):
    # Same-type red pairs attract, so the sign of the x force identifies the regime
    f1, f2 = compute_force_pair(make_particle(0.0, 0.0), make_particle(distance, 0.0), params)

    regime = interaction_regime(distance, params)
    if regime is Regime.REPULSION:
        assert f1[0] < 0 < f2[0]
    elif regime is Regime.INTERACTION:
        assert f1[0] > 0 > f2[0]
    else:
        assert not f1.any() and not f2.any()
