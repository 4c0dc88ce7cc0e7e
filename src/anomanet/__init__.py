"""AnomaNet: investigation game state backend."""

__version__ = "0.1.0"
