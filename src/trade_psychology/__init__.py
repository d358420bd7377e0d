"""Trading journal backend with psychological-state analytics."""

__version__ = "0.1.0"
