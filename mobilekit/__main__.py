"""
Entry point for running the mobilekit CLI as a module.

Usage: python -m mobilekit [command] [options]
"""

from mobilekit.cli.parser import main

if __name__ == "__main__":
    main()
