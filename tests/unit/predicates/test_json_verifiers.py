"""
Unit tests for JSON node verifiers.
"""

import httpx
import pytest

from resilient_client.predicates.document import JsonDocument
from resilient_client.predicates.json_verifiers import (
    JsonNodeWithAttributesVerifier,
    does_not_exist,
    exists,
    has_attribute_values,
    has_attributes,
    json_predicate,
)


@pytest.fixture
def document() -> JsonDocument:
    return JsonDocument(
        {
            "one": "1",
            "two": "2",
            "count": 2,
            "page": {"jcr:content": {"jcr:title": "Home", "hidden": False}},
        }
    )


# ============================================================================
# Existence
# ============================================================================


def test_exists(document):
    """Test existence of a nested node."""
    assert exists("page/jcr:content").verify(document) is True
    assert exists("page/missing").verify(document) is False


def test_does_not_exist(document):
    """Test absence of a node."""
    assert does_not_exist("page/missing").verify(document) is True
    assert does_not_exist("one").verify(document) is False


def test_verifiers_accept_raw_values():
    """Test verifiers wrap already-parsed values."""
    assert exists("a").verify({"a": 1}) is True


# ============================================================================
# Attributes
# ============================================================================


def test_has_attributes(document):
    """Test every listed field must exist."""
    assert has_attributes(["one", "two"]).verify(document) is True
    assert has_attributes(["one", "three"]).verify(document) is False


def test_has_attributes_at_path(document):
    """Test attribute checks on a sub-node."""
    assert has_attributes(["jcr:title"], path="page/jcr:content").verify(document) is True


def test_missing_path_fails(document):
    """Test verification of a missing node is false, not an error."""
    assert has_attributes(["jcr:title"], path="page/other").verify(document) is False
    assert has_attribute_values({"one": "1"}, path="nowhere").verify(document) is False


def test_non_ascii_digit_index_fails():
    """Test a list index that is not a decimal number resolves to a failed verification."""
    document = JsonDocument({"items": [{"name": "first"}]})

    assert has_attributes(["name"], path="items/²").verify(document) is False
    assert has_attributes(["name"], path="items/0").verify(document) is True


# ============================================================================
# Attribute Values
# ============================================================================


def test_subset_of_values_matches(document):
    """Test only the listed fields are compared."""
    assert has_attribute_values({"one": "1"}).verify(document) is True
    assert has_attribute_values({"one": "1", "two": "2"}).verify(document) is True


def test_value_mismatch(document):
    """Test a differing value fails."""
    assert has_attribute_values({"one": "X"}).verify(document) is False


def test_values_compared_as_text(document):
    """Test non-string values are compared through their JSON text."""
    assert has_attribute_values({"count": "2"}).verify(document) is True
    assert has_attribute_values({"hidden": "false"}, path="page/jcr:content").verify(document) is True


def test_stops_at_first_mismatch():
    """Test verification stops at the first mismatching field."""
    looked_up: list[str] = []

    class TrackingDocument(JsonDocument):
        def has(self, name):
            looked_up.append(name)
            return super().has(name)

    verifier = JsonNodeWithAttributesVerifier({"one": "X", "two": "2"})

    assert verifier.verify(TrackingDocument({"one": "1", "two": "2"})) is False
    assert "two" not in looked_up


# ============================================================================
# Response Adapter
# ============================================================================


def test_json_predicate_on_response():
    """Test a verifier used as a response predicate."""
    predicate = json_predicate(has_attribute_values({"state": "published"}))

    assert predicate(httpx.Response(200, json={"state": "published"})) is True
    assert predicate(httpx.Response(200, json={"state": "draft"})) is False


def test_json_predicate_invalid_body_is_false():
    """Test a non-JSON body fails the predicate instead of raising."""
    predicate = json_predicate(exists("anything"))

    assert predicate(httpx.Response(200, text="<html>maintenance</html>")) is False
