"""obridge — bridge plain-text mentions into wikilinks across a vault."""

__version__ = "0.3.0"
