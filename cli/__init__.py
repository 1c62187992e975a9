"""CLI package for Rune Launcher Login

Runs a single Jagex Account login from the terminal and prints the
resulting account and characters.
"""

from cli.main import main

__all__ = [
    "main",
]
