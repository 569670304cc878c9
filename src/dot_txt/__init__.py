"""dot-txt - Render boxes, lines and labels as ASCII art."""

__version__ = "0.1.0"
