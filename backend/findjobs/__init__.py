"""Find Jobs backend: a job board API over MongoDB with cookie-based JWT auth."""

__version__ = "1.0.0"
