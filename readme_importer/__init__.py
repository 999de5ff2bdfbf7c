"""Import GitHub README files into a Markdown vault."""

__version__ = "0.1.0"
