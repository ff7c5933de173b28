"""Mini README: Advance-payment linking package.

``advances`` keeps advance banking entries and their memo/bill parents in step.
"""

from .advances import AdvanceLinker, advance_id_for, build_advance

__all__ = ["AdvanceLinker", "advance_id_for", "build_advance"]
