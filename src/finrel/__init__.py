"""finrel: finite binary relations with classification and relation algebra.

The core (``finrel.relation``) is pure and I/O free. Relation documents and
the CLI live in ``finrel.document`` and ``finrel.cli``.
"""
from __future__ import annotations

from finrel.classify import RelationProfile, classify
from finrel.errors import (
    CompositionMismatchError,
    InvalidRelationError,
    NotAFunctionError,
    OutsideUniverseError,
    PreconditionViolation,
    RelationError,
    UndefinedElementError,
)
from finrel.relation import Relation

__version__ = "0.1.0"

__all__ = [
    "CompositionMismatchError",
    "InvalidRelationError",
    "NotAFunctionError",
    "OutsideUniverseError",
    "PreconditionViolation",
    "Relation",
    "RelationError",
    "RelationProfile",
    "UndefinedElementError",
    "__version__",
    "classify",
]
