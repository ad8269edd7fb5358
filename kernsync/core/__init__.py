"""Core workflow: fingerprinting, release resolution and synchronization."""
