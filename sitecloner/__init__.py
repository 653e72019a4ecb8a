"""Site cloner — fetch a website and make it safe to preview in an iframe."""

__version__ = "0.3.0"
