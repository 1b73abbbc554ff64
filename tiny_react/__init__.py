"""tiny-react: create React apps and run their development scripts."""

__version__ = "0.1.0"
