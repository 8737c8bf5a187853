"""Loomin - turns engineering notes into live physics simulations.

This package provides the notes-to-simulation extraction and evaluation
pipeline, its HTTP API, and a small command-line interface.
"""

__version__ = "0.3.0"
__all__ = ["__version__"]
