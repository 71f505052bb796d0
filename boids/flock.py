"""Flock management - snapshot, O(n²) neighbour forces, and parallel integration."""

import numba
import numpy as np
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .agent import Agent
from .kernels import count_neighbours, flock_step_parallel, flock_step_serial
from .settings import Backend, ClampMode, ConfigError, FlockConfig


@dataclass(frozen=True, eq=False)
class FlockSnapshot:
    """Point-in-time, read-only view of a flock for renderers and drivers."""
    tick: int
    positions: np.ndarray
    velocities: np.ndarray

    def __len__(self) -> int:
        return len(self.positions)

    def centroid(self) -> np.ndarray:
        if len(self.positions) == 0:
            return np.zeros(3)
        return self.positions.mean(axis=0)

    def mean_speed(self) -> float:
        if len(self.velocities) == 0:
            return 0.0
        return float(np.linalg.norm(self.velocities, axis=1).mean())


def _frozen_copy(array: np.ndarray) -> np.ndarray:
    out = array.copy()
    out.setflags(write=False)
    return out


class Flock:
    """
    Fixed population of agents advanced one tick at a time.

    State lives in (n, 3) float64 arrays; each Agent the flock holds is a
    row view into them, so the Numba path and the per-agent Python path
    operate on the same memory.
    """

    def __init__(self, num_birds: Optional[int] = None, config: Optional[FlockConfig] = None,
                 seed: Optional[int] = None):
        config = config or FlockConfig()
        if num_birds is not None:
            config = replace(config, num_birds=num_birds)
        self.config = config

        # Boid data (float64 for physics accuracy)
        rng = np.random.default_rng(seed)
        n = config.num_birds
        half = config.half_size
        positions = rng.uniform(-half, half, (n, 3))
        velocities = rng.uniform(-config.initial_speed, config.initial_speed, (n, 3))
        self._init_state(positions, velocities)

    @classmethod
    def from_state(cls, positions, velocities, config: Optional[FlockConfig] = None) -> "Flock":
        """Build a flock from explicit positions and velocities, each shaped (n, 3)."""
        positions = np.array(positions, dtype=np.float64, ndmin=2)
        velocities = np.array(velocities, dtype=np.float64, ndmin=2)
        if positions.ndim != 2 or positions.shape[1] != 3:
            raise ConfigError(f"positions must have shape (n, 3), got {positions.shape}")
        if velocities.shape != positions.shape:
            raise ConfigError(
                f"velocities shape {velocities.shape} does not match positions shape {positions.shape}"
            )

        config = replace(config or FlockConfig(), num_birds=len(positions))
        flock = cls.__new__(cls)
        flock.config = config
        flock._init_state(positions, velocities)
        return flock

    def _init_state(self, positions: np.ndarray, velocities: np.ndarray):
        n = len(positions)
        self.num_birds = n
        self.tick_count = 0

        self._positions = np.ascontiguousarray(positions, dtype=np.float64)
        self._velocities = np.ascontiguousarray(velocities, dtype=np.float64)
        self._accelerations = np.zeros((n, 3), dtype=np.float64)

        # Agents are row views: mutating one writes into the arrays above
        self._agents = [
            Agent(self._positions[i], self._velocities[i], self._accelerations[i])
            for i in range(n)
        ]

        # Snapshot buffers, reused every tick
        self._snap_positions = np.empty_like(self._positions)
        self._snap_velocities = np.empty_like(self._velocities)
        self._neighbour_counts = np.zeros(n, dtype=np.int64)

        if self.config.backend is Backend.NUMBA:
            self._warmup_numba()

        print(f"[Flock] Initialized {n:,} agents ({self._describe_backend()})")

    def _describe_backend(self) -> str:
        if self.config.backend is Backend.PYTHON:
            return "backend: python"
        if not self.config.parallel:
            return "backend: numba, serial"
        threads = self.config.num_threads or numba.config.NUMBA_NUM_THREADS
        return f"backend: numba, {threads} threads"

    def _warmup_numba(self):
        """Pre-compile Numba functions."""
        pos = np.array([[0.0, 0.0, 0.0], [0.5, 0.0, 0.0]])
        vel = np.zeros((2, 3))
        acc = np.zeros((2, 3))
        step = flock_step_parallel if self.config.parallel else flock_step_serial
        step(pos, vel, acc, pos.copy(), vel.copy(),
             1.0, 1.0, 1.0, 1.0, 0.0, 1.0, 0.1, 0.02, 2.5, 0.8, False, 2)
        count_neighbours(pos, 1.0, np.zeros(2, dtype=np.int64), 2)

    def __len__(self) -> int:
        return self.num_birds

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self):
        """Advance every agent by one step against a consistent pre-tick snapshot."""
        np.copyto(self._snap_positions, self._positions)
        np.copyto(self._snap_velocities, self._velocities)

        if self.config.backend is Backend.PYTHON:
            self._tick_python()
        else:
            self._tick_numba()

        self.tick_count += 1

    def _tick_numba(self):
        cfg = self.config

        if cfg.parallel:
            numba.set_num_threads(cfg.num_threads or numba.config.NUMBA_NUM_THREADS)
            step = flock_step_parallel
        else:
            step = flock_step_serial

        step(
            self._positions,
            self._velocities,
            self._accelerations,
            self._snap_positions,
            self._snap_velocities,
            float(cfg.neighbour_radius),
            float(cfg.separation_weight),
            float(cfg.alignment_weight),
            float(cfg.cohesion_weight),
            float(cfg.gravity),
            float(cfg.half_size - cfg.boundary_margin),
            float(cfg.boundary_force),
            float(cfg.max_speed),
            float(cfg.half_size),
            float(cfg.bounce_damping),
            cfg.clamp_mode is ClampMode.VECTOR,
            self.num_birds
        )

    def _tick_python(self):
        """Reference path: the same rules expressed through the Agent API."""
        cfg = self.config
        soft_limit = cfg.half_size - cfg.boundary_margin
        snapshot = [
            Agent(self._snap_positions[i], self._snap_velocities[i])
            for i in range(self.num_birds)
        ]

        for i, agent in enumerate(self._agents):
            me = snapshot[i]
            separation = np.zeros(3)
            alignment = np.zeros(3)
            cohesion = np.zeros(3)
            neighbour_count = 0

            for j, other in enumerate(snapshot):
                if i == j:
                    continue
                if me.distance_to(other) < cfg.neighbour_radius:
                    separation += me.position - other.position
                    alignment += other.velocity
                    cohesion += other.position
                    neighbour_count += 1

            if neighbour_count > 0:
                separation *= cfg.separation_weight
                alignment = (alignment / neighbour_count - me.velocity) * cfg.alignment_weight
                cohesion = (cohesion / neighbour_count - me.position) * cfg.cohesion_weight
                agent.apply_force(separation)
                agent.apply_force(alignment)
                agent.apply_force(cohesion)

            agent.apply_force(np.array([0.0, -cfg.gravity, 0.0]))

            for axis in range(3):
                if abs(me.position[axis]) > soft_limit:
                    force = np.zeros(3)
                    force[axis] = -np.copysign(1.0, me.position[axis]) * cfg.boundary_force
                    agent.apply_force(force)

            agent.integrate(cfg)

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    def get_positions(self) -> np.ndarray:
        """Read-only copy of all positions, shape (n, 3)."""
        return _frozen_copy(self._positions)

    def get_velocities(self) -> np.ndarray:
        """Read-only copy of all velocities, shape (n, 3)."""
        return _frozen_copy(self._velocities)

    def snapshot(self) -> FlockSnapshot:
        return FlockSnapshot(
            tick=self.tick_count,
            positions=self.get_positions(),
            velocities=self.get_velocities(),
        )

    @property
    def agents(self) -> Tuple[Agent, ...]:
        """Copies of every agent in flock order; mutating them does not affect the flock."""
        return tuple(agent.copy() for agent in self._agents)

    def neighbour_counts(self) -> np.ndarray:
        """Neighbour count per agent at the current state."""
        if self.config.backend is Backend.PYTHON:
            counts = [
                sum(1 for j, other in enumerate(self._agents)
                    if j != i and agent.distance_to(other) < self.config.neighbour_radius)
                for i, agent in enumerate(self._agents)
            ]
            return np.array(counts, dtype=np.int64)

        count_neighbours(self._positions, float(self.config.neighbour_radius),
                         self._neighbour_counts, self.num_birds)
        return self._neighbour_counts.copy()
