"""Building blocks of a terminal chat with a built-in AI clerk."""

__version__ = "0.1.1"