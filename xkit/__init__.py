"""Building blocks for applications: containers, commands, errors, diffs, configuration and utilities."""

__version__ = "0.1.0"

__all__ = [
    "app",
    "condition",
    "configext",
    "contextext",
    "diffmyers",
    "errorsext",
]