"""Small Unix-style tools, a shell parser, a file-system image builder and kernel data models."""

__version__ = "0.1.0"