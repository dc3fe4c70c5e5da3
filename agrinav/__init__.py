"""AgriNav - GPS steering guidance and coverage tracking for ground vehicles."""

__version__ = "0.3.0"

__all__ = ["__version__"]
