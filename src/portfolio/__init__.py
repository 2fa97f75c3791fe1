"""Portfolio - personal portfolio site built from Markdown content."""

__version__ = "0.1.0"
