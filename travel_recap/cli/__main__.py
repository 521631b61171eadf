"""
CLI entry point for Travel Recap.

This allows running the CLI with: python -m travel_recap.cli
"""
from .commands import app

if __name__ == "__main__":
    app()
