"""Mini README: Vehicle classification package.

The ``classifier`` module exposes ``VehicleClassifier``, the pure ownership
lookup consulted by memo, banking and fuel derivation rules.
"""

from .classifier import VehicleClassifier

__all__ = ["VehicleClassifier"]
