"""Client-side state engine for the OpenConv chat client."""

__version__ = "0.1.0"
