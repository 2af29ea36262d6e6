"""Film Pages - static site builder for Star Wars film pages."""

__version__ = "0.1.0"
