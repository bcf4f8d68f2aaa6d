"""Building blocks for generating typed query code from model descriptions and SQL templates."""

__version__ = "0.1.0"

__all__ = [
    "clause",
    "helper",
    "imports",
    "interface",
    "method",
    "model",
    "naming",
    "param",
    "pool",
    "query",
    "section",
]