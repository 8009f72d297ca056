"""
Entry point for running the gup CLI as a module.

Usage: python -m gup.cli [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
