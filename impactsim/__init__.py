"""Educational asteroid impact and deflection simulator."""

__version__ = "0.1.0"
