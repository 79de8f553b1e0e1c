"""Team account status sweeper"""

__version__ = "0.1.0"
