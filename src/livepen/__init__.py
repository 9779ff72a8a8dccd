"""livepen: code-intelligence core for a live-coding playground."""

__version__ = "0.1.0"
