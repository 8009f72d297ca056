"""
Entry point for running gup as a module.

Usage: python -m gup [options]
"""

from gup.cli.parser import main

if __name__ == "__main__":
    main()
