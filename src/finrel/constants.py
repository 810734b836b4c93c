from __future__ import annotations

# Relation document schema.
DOCUMENT_SCHEMA_VERSION = "1"

# Structured error codes.
ERROR_CODE_PAIR_OUTSIDE_UNIVERSE = "PAIR_OUTSIDE_UNIVERSE"
ERROR_CODE_MALFORMED_PAIR = "MALFORMED_PAIR"
ERROR_CODE_NOT_A_FUNCTION = "NOT_A_FUNCTION"
ERROR_CODE_OUTSIDE_DOMAIN = "OUTSIDE_DOMAIN"
ERROR_CODE_OUTSIDE_CODOMAIN = "OUTSIDE_CODOMAIN"
ERROR_CODE_UNDEFINED_ELEMENT = "UNDEFINED_ELEMENT"
ERROR_CODE_COMPOSITION_MISMATCH = "COMPOSITION_MISMATCH"

# Relation kinds, most specific first.
KIND_BIJECTION = "bijection"
KIND_INJECTION = "injection"
KIND_SURJECTION = "surjection"
KIND_FUNCTION = "function"
KIND_RELATION = "relation"
RELATION_KINDS = (
    KIND_BIJECTION,
    KIND_INJECTION,
    KIND_SURJECTION,
    KIND_FUNCTION,
    KIND_RELATION,
)

# CLI exit codes.
EXIT_SUCCESS = 0
EXIT_RELATION_ERROR = 1
EXIT_INVALID_INPUT = 2

LOG_LEVEL_ENV = "FINREL_LOG_LEVEL"
