"""
Tests for Agent: force accumulation, distance, and the integration step
(speed clamp, wall bounce, acceleration reset).
"""

import math

import numpy as np
import pytest

from boids import Agent, Flock, FlockConfig


def make_agent(position=(0.0, 0.0, 0.0), velocity=(0.0, 0.0, 0.0), acceleration=(0.0, 0.0, 0.0)):
    return Agent(np.array(position, dtype=float), np.array(velocity, dtype=float),
                 np.array(acceleration, dtype=float))


class TestConstruction:
    """Tests for building agents."""

    def test_defaults_are_zero(self):
        agent = Agent()
        assert np.array_equal(agent.position, np.zeros(3))
        assert np.array_equal(agent.velocity, np.zeros(3))
        assert np.array_equal(agent.acceleration, np.zeros(3))

    def test_lists_are_converted(self):
        agent = Agent([1, 2, 3], [0, 0, 0], [0, 0, 0])
        assert agent.position.dtype == np.float64

    def test_wrong_shape_rejected(self):
        with pytest.raises(ValueError, match="position"):
            Agent(position=np.zeros(2))

    def test_random_within_bounds(self):
        cfg = FlockConfig()
        rng = np.random.default_rng(0)
        for _ in range(100):
            agent = Agent.random(rng, cfg)
            assert np.all(np.abs(agent.position) <= cfg.half_size)
            assert np.all(np.abs(agent.velocity) <= cfg.initial_speed)
            assert np.array_equal(agent.acceleration, np.zeros(3))

    def test_copy_is_independent(self):
        agent = make_agent(position=(1.0, 1.0, 1.0))
        clone = agent.copy()
        clone.position[0] = 5.0
        assert agent.position[0] == 1.0

    def test_read_only_vectors_are_copied(self):
        """An agent built from a flock's read-only accessors can still integrate."""
        flock = Flock(seed=0)
        positions = flock.get_positions()
        agent = Agent(positions[0], flock.get_velocities()[0])

        assert agent.position.flags.writeable
        agent.apply_force([0.001, 0.0, 0.0])
        agent.integrate()
        assert np.array_equal(agent.acceleration, np.zeros(3))
        assert np.array_equal(flock.get_positions(), positions)

    def test_writeable_vectors_stay_views(self):
        state = np.zeros((2, 3))
        agent = Agent(state[1], np.zeros(3))
        agent.position[0] = 2.5
        assert state[1, 0] == 2.5

    def test_equality_is_identity(self):
        agent = make_agent(position=(1.0, 2.0, 3.0))
        assert agent == agent
        assert agent != agent.copy()


class TestForces:
    """Tests for apply_force and distance_to."""

    def test_apply_force_accumulates(self):
        agent = make_agent()
        agent.apply_force(np.array([0.1, 0.0, -0.2]))
        agent.apply_force([0.1, 0.3, 0.0])
        assert agent.acceleration == pytest.approx([0.2, 0.3, -0.2])

    def test_distance_to(self):
        a = make_agent(position=(0.0, 0.0, 0.0))
        b = make_agent(position=(3.0, 4.0, 0.0))
        assert a.distance_to(b) == 5.0
        assert b.distance_to(a) == 5.0

    def test_distance_to_self_is_zero(self):
        a = make_agent(position=(1.0, -2.0, 0.5))
        assert a.distance_to(a) == 0.0


class TestIntegrate:
    """Tests for the per-axis integration step."""

    def test_slow_agent_moves_unclamped(self):
        agent = make_agent(velocity=(0.005, 0.0, 0.0))
        agent.integrate()
        assert agent.position == pytest.approx([0.005, 0.0, 0.0])
        assert agent.velocity == pytest.approx([0.005, 0.0, 0.0])

    def test_acceleration_reset(self):
        agent = make_agent(acceleration=(0.001, -0.002, 0.003))
        agent.integrate()
        assert np.array_equal(agent.acceleration, np.zeros(3))

    def test_zero_velocity_stays_finite(self):
        """A stationary agent is never renormalized (no 0/0)."""
        agent = make_agent()
        agent.integrate()
        assert np.array_equal(agent.velocity, np.zeros(3))
        assert np.array_equal(agent.position, np.zeros(3))

    def test_bounce_off_positive_wall(self):
        cfg = FlockConfig()
        agent = make_agent(position=(cfg.half_size, 0.0, 0.0), velocity=(0.01, 0.0, 0.0))
        agent.integrate(cfg)
        assert agent.velocity[0] == pytest.approx(-0.008)
        assert agent.position[0] == cfg.half_size

    def test_bounce_off_negative_wall(self):
        cfg = FlockConfig()
        agent = make_agent(position=(0.0, -cfg.half_size, 0.0), velocity=(0.0, -0.01, 0.0))
        agent.integrate(cfg)
        assert agent.velocity[1] == pytest.approx(0.008)
        assert agent.position[1] == -cfg.half_size

    def test_bounce_damping_is_configurable(self):
        cfg = FlockConfig(bounce_damping=0.5)
        agent = make_agent(position=(0.0, 0.0, cfg.half_size), velocity=(0.0, 0.0, 0.01))
        agent.integrate(cfg)
        assert agent.velocity[2] == pytest.approx(-0.005)

    def test_per_axis_clamp_is_order_dependent(self):
        """Each axis is scaled by the speed seen at its turn, earlier axes already scaled."""
        agent = make_agent(acceleration=(0.03, 0.04, 0.0))
        agent.integrate(FlockConfig())

        # x: speed 0.03 -> vx = 0.02
        # y: speed sqrt(0.02² + 0.04²) -> vy = 0.04 * 0.02 / that
        # z: nothing to scale
        vy = 0.04 * 0.02 / math.sqrt(0.02 ** 2 + 0.04 ** 2)
        assert agent.velocity == pytest.approx([0.02, vy, 0.0])
        # The resulting vector is over the cap: this clamp is per axis, not per vector
        assert np.linalg.norm(agent.velocity) > 0.02

    def test_vector_clamp_renormalizes_once(self):
        agent = make_agent(acceleration=(0.03, 0.04, 0.0))
        agent.integrate(FlockConfig(clamp_mode="vector"))
        assert agent.velocity == pytest.approx([0.012, 0.016, 0.0])
        assert np.linalg.norm(agent.velocity) == pytest.approx(0.02)

    @pytest.mark.parametrize("clamp_mode", ["per_axis", "vector"])
    def test_invariants_under_random_forces(self, clamp_mode):
        """After any step: acceleration zero, inside the box, speed capped."""
        cfg = FlockConfig(clamp_mode=clamp_mode)
        rng = np.random.default_rng(1234)

        for _ in range(500):
            agent = make_agent(
                position=rng.uniform(-cfg.half_size, cfg.half_size, 3),
                velocity=rng.uniform(-0.05, 0.05, 3),
                acceleration=rng.uniform(-0.2, 0.2, 3),
            )
            agent.integrate(cfg)

            assert np.array_equal(agent.acceleration, np.zeros(3))
            assert np.all(np.abs(agent.position) <= cfg.half_size)
            assert np.all(np.abs(agent.velocity) <= cfg.max_speed * (1 + 1e-12))
            if clamp_mode == "vector":
                assert np.linalg.norm(agent.velocity) <= cfg.max_speed * (1 + 1e-12)
