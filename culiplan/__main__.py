"""
Package entry point.

Allows running the application via:

    python -m culiplan

This simply forwards execution to culiplan.cli.main().
"""

from culiplan.cli import main

if __name__ == "__main__":
    main()
