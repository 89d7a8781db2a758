"""Front-desk management service for hotels."""

__version__ = "0.1.0"
