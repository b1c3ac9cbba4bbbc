"""Release delivery dashboard backed by the Pollbot status service."""

__version__ = "0.1.0"
