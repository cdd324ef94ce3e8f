"""Machine presets and reference programs."""
