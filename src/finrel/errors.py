from __future__ import annotations

from typing import Any

from finrel.constants import (
    ERROR_CODE_COMPOSITION_MISMATCH,
    ERROR_CODE_NOT_A_FUNCTION,
    ERROR_CODE_OUTSIDE_CODOMAIN,
    ERROR_CODE_OUTSIDE_DOMAIN,
    ERROR_CODE_UNDEFINED_ELEMENT,
)


class RelationError(Exception):
    """Base class for every error raised by finrel.

    Carries a stable ``code`` next to the human readable message so callers
    can branch on the failure without parsing text.
    """

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = dict(details or {})

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidRelationError(RelationError):
    """Raised at construction when a pair breaks the domain/codomain invariant."""

    def __init__(
        self,
        code: str,
        message: str,
        pair: Any,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(code, message, {"pair": pair, **(details or {})})
        self.pair = pair


class PreconditionViolation(RelationError):
    def __init__(
        self,
        code: str,
        message: str,
        operation: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(code, message, {"operation": operation, **(details or {})})
        self.operation = operation


class NotAFunctionError(PreconditionViolation):
    def __init__(self, operation: str, witness: Any, images: frozenset[Any]) -> None:
        super().__init__(
            ERROR_CODE_NOT_A_FUNCTION,
            f"{operation} requires a function, but {witness!r} maps to {len(images)} values",
            operation,
            {"witness": witness, "images": images},
        )


class OutsideUniverseError(PreconditionViolation):
    def __init__(self, operation: str, element: Any, side: str) -> None:
        code = ERROR_CODE_OUTSIDE_DOMAIN if side == "domain" else ERROR_CODE_OUTSIDE_CODOMAIN
        super().__init__(
            code,
            f"{operation}: {element!r} is not in the {side}",
            operation,
            {"element": element, "side": side},
        )
        self.element = element
        self.side = side


class UndefinedElementError(PreconditionViolation):
    def __init__(self, operation: str, element: Any) -> None:
        super().__init__(
            ERROR_CODE_UNDEFINED_ELEMENT,
            f"{operation}: relation is not defined for {element!r}",
            operation,
            {"element": element},
        )
        self.element = element


class CompositionMismatchError(PreconditionViolation):
    def __init__(self, left_only: frozenset[Any], right_only: frozenset[Any]) -> None:
        super().__init__(
            ERROR_CODE_COMPOSITION_MISMATCH,
            "compose requires other.domain to equal this.codomain "
            f"({len(left_only)} codomain-only, {len(right_only)} domain-only elements)",
            "compose",
            {"codomain_only": left_only, "domain_only": right_only},
        )


__all__ = [
    "CompositionMismatchError",
    "InvalidRelationError",
    "NotAFunctionError",
    "OutsideUniverseError",
    "PreconditionViolation",
    "RelationError",
    "UndefinedElementError",
]
