"""A simulated Linux/Windows shell over a virtual desktop filesystem."""

__version__ = "0.1.0"
