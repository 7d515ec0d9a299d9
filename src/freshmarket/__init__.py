"""
Freshmarket produce marketplace package.

The package exposes the offer matching and checkout pricing engine together with
the persistence layer, vendor notification fan-out and the HTTP API built on top.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
