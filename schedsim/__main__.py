"""
Entry point for running schedsim as a module: python -m schedsim
"""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
