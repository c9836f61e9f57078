"""Football league simulator with an HTTP API and Monte Carlo championship odds."""

__version__ = "0.1.0"