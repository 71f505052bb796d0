"""Individual flocking agent with position, velocity, and acceleration."""

import numpy as np
from dataclasses import dataclass, field
from typing import Optional

from .kernels import distance, integrate_agent
from .settings import ClampMode, FlockConfig

DEFAULT_CONFIG = FlockConfig()


@dataclass(eq=False)
class Agent:
    """
    A single agent (bird) in the simulation.

    Attributes:
        position: 3D position vector
        velocity: 3D velocity vector
        acceleration: 3D acceleration vector (reset by every integrate())

    Vectors are float64 arrays and are always mutated in place, so an agent
    built on row views of a flock's state arrays writes straight through to
    the flock. Read-only inputs are copied. Agents compare by identity.
    """
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    acceleration: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        for name in ("position", "velocity", "acceleration"):
            vector = np.asarray(getattr(self, name), dtype=np.float64)
            if vector.shape != (3,):
                raise ValueError(f"{name} must have shape (3,), got {vector.shape}")
            if not vector.flags.writeable:
                vector = vector.copy()
            setattr(self, name, vector)

    @classmethod
    def random(cls, rng: np.random.Generator, config: FlockConfig = DEFAULT_CONFIG) -> "Agent":
        """Create an agent uniformly placed in the box with a small random velocity."""
        half = config.half_size
        return cls(
            position=rng.uniform(-half, half, 3),
            velocity=rng.uniform(-config.initial_speed, config.initial_speed, 3),
        )

    def apply_force(self, force):
        """Add a force to the agent's acceleration."""
        self.acceleration += force

    def integrate(self, config: Optional[FlockConfig] = None):
        """Update velocity and position from acceleration, then bounce off walls."""
        config = config or DEFAULT_CONFIG
        integrate_agent(
            self.position,
            self.velocity,
            self.acceleration,
            config.max_speed,
            config.half_size,
            config.bounce_damping,
            config.clamp_mode is ClampMode.VECTOR,
        )

    def distance_to(self, other: "Agent") -> float:
        """Euclidean distance between this agent and another."""
        return distance(self.position, other.position)

    def copy(self) -> "Agent":
        """Independent copy of this agent's state."""
        return Agent(self.position.copy(), self.velocity.copy(), self.acceleration.copy())
