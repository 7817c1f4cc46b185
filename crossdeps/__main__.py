"""
Entry point for running crossdeps CLI as a module.

Usage: python -m crossdeps [command] [options]
"""

from crossdeps.cli.parser import main

if __name__ == "__main__":
    main()
