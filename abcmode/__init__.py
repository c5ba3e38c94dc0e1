"""abcmode: structural editing core for ABC music notation."""

__version__ = "0.1.0"
