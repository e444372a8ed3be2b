"""envhub — declarative multi-profile development environments."""

__version__ = "0.1.0"
