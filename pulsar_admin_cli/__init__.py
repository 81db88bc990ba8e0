"""Administration CLI for a Pulsar/BookKeeper messaging cluster.

The command surface is implemented with Typer/Click and Rich for help and
error ergonomics, while command payload outputs remain machine-friendly.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
