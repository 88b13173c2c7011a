"""
Convenience entry point for running bookingwindow as a module.

Usage: python -m bookingwindow [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
