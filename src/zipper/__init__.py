"""zipper - bundle files into a single zip archive."""

__version__ = "0.1.0"
