"""Command-line tooling: presets for the simulation driver."""
