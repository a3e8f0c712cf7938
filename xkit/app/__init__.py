"""Application containers, exit-code errors, command trees and named-application helpers."""

__all__ = [
    "appcmd",
    "appext",
    "container",
    "env",
    "errors",
    "positional_args",
]