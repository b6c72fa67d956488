"""
Entry point for running mac_tune as a module.

Usage:
    python -m mac_tune --backup
"""

from .cli import main

if __name__ == "__main__":
    main()
