"""Immutable flock configuration with construction-time validation."""

import math
import numbers
from dataclasses import dataclass, fields, asdict
from enum import Enum
from typing import Any, Mapping, Optional

import numba


class ConfigError(ValueError):
    """Raised when a flock configuration is invalid."""


class Backend(Enum):
    NUMBA = "numba"    # JIT kernels, optionally parallel across agents
    PYTHON = "python"  # Reference path through the Agent API


class ClampMode(Enum):
    PER_AXIS = "per_axis"  # Clamp each axis against the partially updated speed
    VECTOR = "vector"      # Add full acceleration, renormalize once


@dataclass(frozen=True)
class FlockConfig:
    """
    Parameters of one flocking simulation, fixed at construction.

    Defaults reproduce the classic 10-bird setup. Invalid values raise
    ConfigError immediately rather than surfacing as NaNs mid-run.
    """
    num_birds: int = 10
    max_speed: float = 0.02
    neighbour_radius: float = 1.0
    separation_weight: float = 1.5
    alignment_weight: float = 1.0
    cohesion_weight: float = 1.0
    gravity: float = 0.0005
    boundary_size: float = 5.0
    boundary_force: float = 0.1
    boundary_margin: float = 1.0
    bounce_damping: float = 0.8
    initial_speed: float = 0.01
    clamp_mode: ClampMode = ClampMode.PER_AXIS
    backend: Backend = Backend.NUMBA
    parallel: bool = True
    num_threads: Optional[int] = None

    def __post_init__(self):
        # Accept plain strings from config dicts and the CLI
        object.__setattr__(self, "clamp_mode", _coerce_enum(ClampMode, self.clamp_mode, "clamp_mode"))
        object.__setattr__(self, "backend", _coerce_enum(Backend, self.backend, "backend"))

        if isinstance(self.num_birds, bool) or not isinstance(self.num_birds, numbers.Integral):
            raise ConfigError(f"num_birds must be an integer, got {self.num_birds!r}")
        if self.num_birds < 0:
            raise ConfigError(f"num_birds must be >= 0, got {self.num_birds}")

        if not isinstance(self.parallel, bool):
            raise ConfigError(f"parallel must be a bool, got {self.parallel!r}")

        for name in ("separation_weight", "alignment_weight", "cohesion_weight",
                     "gravity", "boundary_force"):
            _require_finite(name, getattr(self, name))

        _require_positive("max_speed", self.max_speed)
        _require_positive("boundary_size", self.boundary_size)
        for name in ("neighbour_radius", "boundary_margin", "bounce_damping", "initial_speed"):
            _require_non_negative(name, getattr(self, name))

        if self.num_threads is not None:
            if isinstance(self.num_threads, bool) or not isinstance(self.num_threads, numbers.Integral):
                raise ConfigError(f"num_threads must be an integer or None, got {self.num_threads!r}")
            max_threads = numba.config.NUMBA_NUM_THREADS
            if not 1 <= self.num_threads <= max_threads:
                raise ConfigError(f"num_threads must be in 1..{max_threads}, got {self.num_threads}")

    @property
    def half_size(self) -> float:
        """Distance from the origin to each boundary wall."""
        return self.boundary_size / 2.0

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "FlockConfig":
        """Build a config from a dict like config.boids.BOIDS."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError(f"Unknown flock settings: {', '.join(unknown)}")
        return cls(**values)

    def to_dict(self) -> dict:
        """Plain-dict form with enums flattened to their string values."""
        values = asdict(self)
        values["clamp_mode"] = self.clamp_mode.value
        values["backend"] = self.backend.value
        return values


def _coerce_enum(enum_cls, value, name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ConfigError(f"{name} must be one of: {choices} (got {value!r})") from None


def _require_finite(name: str, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
        raise ConfigError(f"{name} must be a finite number, got {value!r}")


def _require_positive(name: str, value):
    _require_finite(name, value)
    if value <= 0:
        raise ConfigError(f"{name} must be > 0, got {value}")


def _require_non_negative(name: str, value):
    _require_finite(name, value)
    if value < 0:
        raise ConfigError(f"{name} must be >= 0, got {value}")
