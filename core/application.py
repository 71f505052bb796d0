"""Headless application loop that ticks a flock at a fixed frame rate."""

from typing import Callable, Optional

import pygame

from config import boids as config
from boids import Flock, FlockConfig, FlockSnapshot


class Application:
    """
    Drives a Flock once per frame and hands each frame's snapshot to an
    optional consumer (a renderer, recorder, or test probe).

    Args:
        flock_config: Flock parameters (defaults to config.boids.BOIDS)
        seed: Initialization seed for reproducible runs
        fps: Target frame rate; 0 runs uncapped
        max_frames: Stop after this many ticks; 0 or None runs until stop()
        report_interval: Print a status line every N ticks; 0 disables
        on_frame: Called with a FlockSnapshot after every tick
    """

    def __init__(
        self,
        flock_config: Optional[FlockConfig] = None,
        seed: Optional[int] = config.SIMULATION["seed"],
        fps: int = config.SIMULATION["fps"],
        max_frames: Optional[int] = config.SIMULATION["frames"],
        report_interval: int = config.SIMULATION["report_interval"],
        on_frame: Optional[Callable[[FlockSnapshot], None]] = None,
    ):
        # Simulation (pygame is initialised only once the flock exists)
        self.flock = Flock(config=flock_config or FlockConfig.from_dict(config.BOIDS), seed=seed)
        self.on_frame = on_frame

        pygame.init()

        # State
        self.clock = pygame.time.Clock()
        self.target_fps = fps
        self.max_frames = max_frames or 0
        self.report_interval = report_interval
        self.running = True
        self.frame = 0
        self.fps = 0.0

    def stop(self):
        """Finish the current frame, then leave the loop."""
        self.running = False

    def _update(self):
        """Advance the simulation one tick and publish the result."""
        self.flock.tick()
        self.frame += 1

        snapshot = self.flock.snapshot()
        if self.on_frame is not None:
            self.on_frame(snapshot)
        return snapshot

    def _report(self, snapshot: FlockSnapshot):
        cx, cy, cz = snapshot.centroid()
        print(
            f"[App] Tick {snapshot.tick:,}  |  FPS: {self.fps:.0f}  |  "
            f"Centroid: ({cx:+.2f}, {cy:+.2f}, {cz:+.2f})  |  "
            f"Mean speed: {snapshot.mean_speed():.4f}"
        )

    def run(self) -> FlockSnapshot:
        """Main application loop. Returns the last frame's snapshot."""
        snapshot = self.flock.snapshot()
        print(f"[App] Starting main loop ({self._describe_pacing()})")

        try:
            while self.running:
                self.clock.tick(self.target_fps)
                self.fps = self.clock.get_fps()

                snapshot = self._update()

                if self.report_interval and self.frame % self.report_interval == 0:
                    self._report(snapshot)

                if self.max_frames and self.frame >= self.max_frames:
                    self.running = False
        finally:
            pygame.quit()

        print(f"[App] Stopped after {self.frame:,} ticks")
        return snapshot

    def _describe_pacing(self) -> str:
        rate = f"{self.target_fps} FPS" if self.target_fps else "uncapped"
        limit = f"{self.max_frames:,} ticks" if self.max_frames else "until interrupted"
        return f"{rate}, {limit}"
