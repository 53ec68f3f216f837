"""
EdgeMapper Application

Command line entry points.
"""

from edgemapper.app.cli import main

__all__ = [
    "main",
]
