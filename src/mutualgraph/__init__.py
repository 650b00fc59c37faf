"""mutualgraph: merge social-graph exports and explore the mutuals graph."""

__version__ = "0.3.0"
