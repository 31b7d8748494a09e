"""hubshift: move, revert and export content between Dynamic Content hubs."""

__version__ = "0.1.0"
