"""
Larder ingredient reconciliation package.

The package scores pantry coverage for recipes, aggregates meal plan requirements
and regenerates grocery lists without discarding user edits.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
