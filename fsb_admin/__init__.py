"""FSB Admin - bot registry and live statistics dashboard."""

__version__ = "1.0.0"
