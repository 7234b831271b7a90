"""Main entry point when executing promoted_demo as a package.

This allows running the package using python -m promoted_demo.
"""

from promoted_demo.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
