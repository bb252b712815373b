"""Item catalog service: category-normalized items with content-addressed images."""

__version__ = "1.0.0"
