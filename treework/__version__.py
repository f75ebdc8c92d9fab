"""Version information for treework."""

__version__ = "0.3.0"
