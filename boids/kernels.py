"""Numba JIT kernels for the O(n²) flocking step and per-agent integration."""

import math
import numpy as np
from numba import njit, prange


# ============================================================================
# PER-AGENT HELPERS
# ============================================================================

@njit(cache=True)
def distance(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between two 3D points."""
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    dz = a[2] - b[2]
    return math.sqrt(dx * dx + dy * dy + dz * dz)


@njit(cache=True)
def integrate_agent(
    position: np.ndarray,
    velocity: np.ndarray,
    acceleration: np.ndarray,
    max_speed: float,
    half_size: float,
    bounce_damping: float,
    vector_clamp: bool
):
    """
    Advance one agent by a single step, in place.

    Per-axis clamp (default): each axis adds its acceleration, then the full
    speed is recomputed from the velocity as updated so far and only that
    axis is scaled down. Later axes therefore see partially scaled earlier
    axes. Vector clamp: all axes add acceleration first and the whole
    velocity is renormalized once.

    A zero velocity never reaches the division since the clamp only fires
    when speed exceeds max_speed.
    """
    if vector_clamp:
        for axis in range(3):
            velocity[axis] += acceleration[axis]
        speed = math.sqrt(
            velocity[0] * velocity[0] +
            velocity[1] * velocity[1] +
            velocity[2] * velocity[2]
        )
        if speed > max_speed:
            scale = max_speed / speed
            for axis in range(3):
                velocity[axis] *= scale

    for axis in range(3):
        if not vector_clamp:
            velocity[axis] += acceleration[axis]
            speed = math.sqrt(
                velocity[0] * velocity[0] +
                velocity[1] * velocity[1] +
                velocity[2] * velocity[2]
            )
            if speed > max_speed:
                scale = max_speed / speed
                velocity[axis] *= scale

        position[axis] += velocity[axis]

        # Hard wall: reflect with energy loss and pin to the wall
        if abs(position[axis]) > half_size:
            velocity[axis] = -velocity[axis] * bounce_damping
            if position[axis] > 0.0:
                position[axis] = half_size
            else:
                position[axis] = -half_size

        acceleration[axis] = 0.0


@njit(cache=True)
def steer_agent(
    i: int,
    snap_positions: np.ndarray,
    snap_velocities: np.ndarray,
    acceleration: np.ndarray,
    neighbour_radius: float,
    separation_weight: float,
    alignment_weight: float,
    cohesion_weight: float,
    gravity: float,
    soft_limit: float,
    boundary_force: float,
    num_birds: int
):
    """Accumulate flocking, gravity and soft-wall forces for agent i."""
    pos_i = snap_positions[i]
    vel_i = snap_velocities[i]

    sep_x, sep_y, sep_z = 0.0, 0.0, 0.0
    align_x, align_y, align_z = 0.0, 0.0, 0.0
    coh_x, coh_y, coh_z = 0.0, 0.0, 0.0
    neighbour_count = 0

    for j in range(num_birds):
        if i == j:
            continue

        pos_j = snap_positions[j]
        if distance(pos_i, pos_j) < neighbour_radius:
            sep_x += pos_i[0] - pos_j[0]
            sep_y += pos_i[1] - pos_j[1]
            sep_z += pos_i[2] - pos_j[2]

            align_x += snap_velocities[j, 0]
            align_y += snap_velocities[j, 1]
            align_z += snap_velocities[j, 2]

            coh_x += pos_j[0]
            coh_y += pos_j[1]
            coh_z += pos_j[2]

            neighbour_count += 1

    if neighbour_count > 0:
        sep_x *= separation_weight
        sep_y *= separation_weight
        sep_z *= separation_weight

        align_x = (align_x / neighbour_count - vel_i[0]) * alignment_weight
        align_y = (align_y / neighbour_count - vel_i[1]) * alignment_weight
        align_z = (align_z / neighbour_count - vel_i[2]) * alignment_weight

        coh_x = (coh_x / neighbour_count - pos_i[0]) * cohesion_weight
        coh_y = (coh_y / neighbour_count - pos_i[1]) * cohesion_weight
        coh_z = (coh_z / neighbour_count - pos_i[2]) * cohesion_weight

        # Same accumulation order as applying the three forces one by one
        acceleration[0] += sep_x
        acceleration[1] += sep_y
        acceleration[2] += sep_z
        acceleration[0] += align_x
        acceleration[1] += align_y
        acceleration[2] += align_z
        acceleration[0] += coh_x
        acceleration[1] += coh_y
        acceleration[2] += coh_z

    acceleration[1] += -gravity

    for axis in range(3):
        if abs(pos_i[axis]) > soft_limit:
            acceleration[axis] += -math.copysign(1.0, pos_i[axis]) * boundary_force


# ============================================================================
# WHOLE-FLOCK STEP
# ============================================================================

@njit(parallel=True, cache=True)
def flock_step_parallel(
    positions: np.ndarray,
    velocities: np.ndarray,
    accelerations: np.ndarray,
    snap_positions: np.ndarray,
    snap_velocities: np.ndarray,
    neighbour_radius: float,
    separation_weight: float,
    alignment_weight: float,
    cohesion_weight: float,
    gravity: float,
    soft_limit: float,
    boundary_force: float,
    max_speed: float,
    half_size: float,
    bounce_damping: float,
    vector_clamp: bool,
    num_birds: int
):
    """One tick across worker threads. Reads snapshots, writes only row i."""
    for i in prange(num_birds):
        steer_agent(
            i, snap_positions, snap_velocities, accelerations[i],
            neighbour_radius, separation_weight, alignment_weight, cohesion_weight,
            gravity, soft_limit, boundary_force, num_birds
        )
        integrate_agent(
            positions[i], velocities[i], accelerations[i],
            max_speed, half_size, bounce_damping, vector_clamp
        )


@njit(cache=True)
def flock_step_serial(
    positions: np.ndarray,
    velocities: np.ndarray,
    accelerations: np.ndarray,
    snap_positions: np.ndarray,
    snap_velocities: np.ndarray,
    neighbour_radius: float,
    separation_weight: float,
    alignment_weight: float,
    cohesion_weight: float,
    gravity: float,
    soft_limit: float,
    boundary_force: float,
    max_speed: float,
    half_size: float,
    bounce_damping: float,
    vector_clamp: bool,
    num_birds: int
):
    """Single-threaded variant of flock_step_parallel."""
    for i in range(num_birds):
        steer_agent(
            i, snap_positions, snap_velocities, accelerations[i],
            neighbour_radius, separation_weight, alignment_weight, cohesion_weight,
            gravity, soft_limit, boundary_force, num_birds
        )
        integrate_agent(
            positions[i], velocities[i], accelerations[i],
            max_speed, half_size, bounce_damping, vector_clamp
        )


@njit(parallel=True, cache=True)
def count_neighbours(positions: np.ndarray, neighbour_radius: float, counts: np.ndarray, num_birds: int):
    """Neighbour count per agent under the strict-radius rule used by the step."""
    for i in prange(num_birds):
        count = 0
        for j in range(num_birds):
            if i != j and distance(positions[i], positions[j]) < neighbour_radius:
                count += 1
        counts[i] = count
