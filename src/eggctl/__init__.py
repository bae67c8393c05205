"""eggctl: resolve egg variables and build panel API payloads."""

__version__ = "0.3.0"
