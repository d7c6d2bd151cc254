"""Resolution environment and per-package build configuration."""
