"""A small top-down arcade shooter whose game rules run without a window."""

__version__ = "0.1.0"
__all__ = ["__version__"]