"""3D flocking simulation core: agents, flock, and configuration."""

from .settings import Backend, ClampMode, ConfigError, FlockConfig
from .agent import Agent
from .flock import Flock, FlockSnapshot

__all__ = [
    "Agent",
    "Backend",
    "ClampMode",
    "ConfigError",
    "Flock",
    "FlockConfig",
    "FlockSnapshot",
]
