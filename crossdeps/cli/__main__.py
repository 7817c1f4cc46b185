"""
Entry point for running crossdeps CLI as a module.

Usage: python -m crossdeps.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
