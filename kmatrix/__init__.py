"""Run a test command against a matrix of guest kernel versions."""

__version__ = "0.1.0"
