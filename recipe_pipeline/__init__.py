"""Recipe extraction pipeline: recipe URL → structured recipe."""

__version__ = "0.1.0"
