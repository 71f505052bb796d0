"""
3D Boids Simulation
===================

Headless flocking simulation driver. Runs a flock at a fixed tick rate and
prints periodic status lines.

Usage:
    python main.py                          # Classic 10-bird flock until Ctrl+C
    python main.py --frames 1000            # Stop after 1000 ticks
    python main.py --preset murmuration     # Use a named preset
    python main.py --list-presets           # Show all presets
    python main.py -n 200 --seed 7 --fps 0  # 200 birds, reproducible, uncapped
"""

import argparse
import sys

from boids import ConfigError
from config import boids as config
from core import Application
from tools.presets import (
    PRESETS, build_flock_config, get_preset_by_index, get_preset_config, print_preset_menu
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="3D boids flocking simulation")
    parser.add_argument("--list-presets", action="store_true", help="List all presets and exit")
    parser.add_argument("--preset", type=str, default="classic", help="Use preset by name (default: classic)")
    parser.add_argument("--preset-id", type=int, help="Use preset by index number")
    parser.add_argument("--birds", "-n", type=int, help="Override number of birds")
    parser.add_argument("--frames", "-f", type=int, help="Stop after N ticks (0 = run until Ctrl+C)")
    parser.add_argument("--fps", type=int, help="Target tick rate (0 = uncapped)")
    parser.add_argument("--seed", type=int, default=config.SIMULATION["seed"], help="Initialization seed")
    parser.add_argument("--threads", type=int, help="Numba worker threads")
    parser.add_argument("--backend", choices=["numba", "python"], help="Compute backend")
    parser.add_argument("--clamp", choices=["per_axis", "vector"], help="Speed clamp mode")
    parser.add_argument("--serial", action="store_true", help="Use the single-threaded kernel")
    parser.add_argument("--report", type=int, default=config.SIMULATION["report_interval"],
                        help="Print status every N ticks (0 = quiet)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.list_presets:
        print_preset_menu()
        return 0

    # Handle preset selection
    if args.preset_id is not None:
        key, preset = get_preset_by_index(args.preset_id)
        if key is None:
            print(f"[App] Invalid preset index: {args.preset_id}")
            return 1
        preset = get_preset_config(key)
    else:
        preset = get_preset_config(args.preset)
        if preset is None:
            print(f"[App] Unknown preset: {args.preset}")
            print("[App] Available presets:")
            for key in sorted(PRESETS.keys()):
                print(f"  - {key}")
            return 1
    print(f"[App] Using preset: {preset['name']}")

    try:
        flock_config = build_flock_config(
            preset,
            num_birds=args.birds,
            num_threads=args.threads,
            backend=args.backend,
            clamp_mode=args.clamp,
            parallel=False if args.serial else None,
        )
    except ConfigError as e:
        print(f"[App] Invalid configuration: {e}")
        return 1

    app = Application(
        flock_config=flock_config,
        seed=args.seed,
        fps=args.fps if args.fps is not None else preset["fps"],
        max_frames=args.frames if args.frames is not None else preset["frames"],
        report_interval=args.report,
    )

    try:
        app.run()
    except KeyboardInterrupt:
        print("\n[App] Interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
