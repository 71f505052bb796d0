"""
Flock Presets Library
=====================

Named flock configurations organized by category. Each preset carries the
FlockConfig overrides it needs plus driver settings (frames, fps).

Categories:
- CLASSIC: The reference 10-bird setup
- VARIANT: Single-parameter changes to compare against CLASSIC
- STRESS: Larger populations for timing the O(n²) neighbour scan
"""

from typing import Dict, List, Optional, Tuple

from config import boids as config
from boids import FlockConfig

PRESETS: Dict[str, dict] = {}

# -----------------------------------------------------------------------------
# CLASSIC
# -----------------------------------------------------------------------------

PRESETS["classic"] = {
    "name": "Classic Flock",
    "description": "10 birds in a 5-unit box, per-axis speed clamp",
    "category": "CLASSIC",
    "flock": {},
    "frames": 0,
    "fps": 60,
}

# -----------------------------------------------------------------------------
# VARIANT
# -----------------------------------------------------------------------------

PRESETS["vector_clamp"] = {
    "name": "Vector Speed Clamp",
    "description": "Classic flock with the velocity renormalized once per step",
    "category": "VARIANT",
    "flock": {"clamp_mode": "vector"},
    "frames": 0,
    "fps": 60,
}

PRESETS["zero_gravity"] = {
    "name": "Zero Gravity",
    "description": "No downward bias, flock drifts freely",
    "category": "VARIANT",
    "flock": {"gravity": 0.0},
    "frames": 0,
    "fps": 60,
}

PRESETS["loose"] = {
    "name": "Loose Swarm",
    "description": "Weak cohesion and strong separation, birds spread out",
    "category": "VARIANT",
    "flock": {"cohesion_weight": 0.2, "separation_weight": 3.0},
    "frames": 0,
    "fps": 60,
}

PRESETS["tight"] = {
    "name": "Tight Ball",
    "description": "Wide neighbour radius with strong cohesion",
    "category": "VARIANT",
    "flock": {"neighbour_radius": 2.0, "cohesion_weight": 2.0, "separation_weight": 0.5},
    "frames": 0,
    "fps": 60,
}

# -----------------------------------------------------------------------------
# STRESS
# -----------------------------------------------------------------------------

PRESETS["murmuration"] = {
    "name": "Murmuration",
    "description": "500 birds in a 20-unit box",
    "category": "STRESS",
    "flock": {"num_birds": 500, "boundary_size": 20.0},
    "frames": 3000,
    "fps": 60,
}

PRESETS["swarm_5k"] = {
    "name": "Swarm 5K",
    "description": "5,000 birds, uncapped frame rate for benchmarking",
    "category": "STRESS",
    "flock": {"num_birds": 5000, "boundary_size": 50.0},
    "frames": 500,
    "fps": 0,
}


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def get_preset_list() -> List[Tuple[str, dict]]:
    """Get list of all presets sorted by category."""
    category_order = ["CLASSIC", "VARIANT", "STRESS"]

    sorted_presets = sorted(
        PRESETS.items(),
        key=lambda x: (category_order.index(x[1]["category"]) if x[1]["category"] in category_order else 99, x[0])
    )
    return sorted_presets


def print_preset_menu():
    """Print formatted preset listing."""
    presets = get_preset_list()
    current_category = None

    print("\n" + "=" * 70)
    print("  FLOCK SIMULATION PRESETS")
    print("=" * 70)

    for idx, (key, preset) in enumerate(presets):
        if preset["category"] != current_category:
            current_category = preset["category"]
            print(f"\n{'─' * 70}")
            print(f"  {current_category}")
            print(f"{'─' * 70}")

        birds = preset["flock"].get("num_birds", config.BOIDS["num_birds"])
        frames = preset["frames"] or "∞"

        print(f"  [{idx:2d}] {preset['name']:<25} {birds:>6} birds | {frames:>5} frames | key: {key}")
        print(f"       {preset['description']}")

    print(f"\n{'=' * 70}")


def get_preset_by_index(index: int) -> Tuple[Optional[str], Optional[dict]]:
    """Get preset by menu index."""
    presets = get_preset_list()
    if 0 <= index < len(presets):
        return presets[index]
    return None, None


def get_preset_config(key: str) -> Optional[dict]:
    """Get a copy of a preset by key, with its flock overrides copied too."""
    if key not in PRESETS:
        return None

    preset = PRESETS[key].copy()
    preset["flock"] = dict(preset["flock"])
    preset["key"] = key
    return preset


def build_flock_config(preset: dict, **overrides) -> FlockConfig:
    """
    Merge config.boids.BOIDS, the preset's flock overrides, and any
    explicit overrides (None values are ignored) into a validated FlockConfig.
    """
    values = dict(config.BOIDS)
    values.update(preset.get("flock", {}))
    values.update({k: v for k, v in overrides.items() if v is not None})
    return FlockConfig.from_dict(values)
