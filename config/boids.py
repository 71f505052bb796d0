"""Configuration for 3D Boids flocking simulation."""

SIMULATION = {
    "fps": 60,                 # Target tick rate for the driver (0 = uncapped)
    "frames": 0,               # Ticks to run before exiting (0 = until interrupted)
    "seed": None,              # Initialization seed (None = fresh entropy)
    "report_interval": 60,     # Print a status line every N ticks
}

BOIDS = {
    "num_birds": 10,
    "max_speed": 0.02,
    "initial_speed": 0.01,     # Spawn velocity range per axis (+/-)

    # Flocking behavior
    "neighbour_radius": 1.0,   # Strict: agents exactly this far apart are not neighbours
    "separation_weight": 1.5,  # Avoid crowding
    "alignment_weight": 1.0,   # Match neighbour velocities
    "cohesion_weight": 1.0,    # Move toward group center
    "gravity": 0.0005,         # Constant pull along -y

    # Boundary box (cube centered on origin)
    "boundary_size": 5.0,      # Full edge length
    "boundary_force": 0.1,     # Push back once inside the soft margin
    "boundary_margin": 1.0,    # Soft margin inside the hard wall
    "bounce_damping": 0.8,     # Velocity kept on wall bounce

    # Integration
    "clamp_mode": "per_axis",  # "per_axis" (classic) or "vector" (renormalize once)

    # Compute
    "backend": "numba",        # "numba" or "python" (reference)
    "parallel": True,
    "num_threads": None,       # None = all numba threads
}
