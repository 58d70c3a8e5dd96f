"""
Composable success predicates over responses and JSON documents.

Includes:
- Response predicates (StatusCodePredicate, BodyContainsPredicate)
- AND composition with short-circuit (all_of)
- JSON document access (JsonDocument) and verifiers
"""

from resilient_client.predicates.composition import AllOf, Predicate, all_of
from resilient_client.predicates.document import MISSING, JsonDocument
from resilient_client.predicates.json_verifiers import (
    JsonNodeVerifier,
    does_not_exist,
    exists,
    has_attribute_values,
    has_attributes,
    json_predicate,
)
from resilient_client.predicates.response import (
    BodyContainsPredicate,
    ResponseLike,
    StatusCodePredicate,
)

__all__ = [
    "Predicate",
    "AllOf",
    "all_of",
    "ResponseLike",
    "StatusCodePredicate",
    "BodyContainsPredicate",
    "JsonDocument",
    "MISSING",
    "JsonNodeVerifier",
    "exists",
    "does_not_exist",
    "has_attributes",
    "has_attribute_values",
    "json_predicate",
]
