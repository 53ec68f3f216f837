"""
EdgeMapper Main Entry Point

This module provides the main entry point for running EdgeMapper.
"""

import sys

from edgemapper.app.cli import main


if __name__ == "__main__":
    sys.exit(main())
