"""
Convenience entry point for running stylebook as a module.

Usage: python -m stylebook [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
