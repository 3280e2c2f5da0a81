"""
Package entry point.

Allows running the application via:

    python -m rtuschedule

This simply forwards execution to rtuschedule.cli.main().
"""

from rtuschedule.cli import main

if __name__ == "__main__":
    main()
