"""
Entry point for running the mobilekit CLI as a module.

Usage: python -m mobilekit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
