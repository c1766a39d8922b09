"""VoltMap — EV charging station finder, charging sessions and rewards API."""

__version__ = "0.1.0"
