"""
Structured-document verifiers.

These verifiers check a JSON response body:
- A node exists (or does not exist) at a path
- A node carries a given set of fields
- A node carries given field values

Like the response predicates, verifiers never raise on a document that does
not match: a missing node is a failed verification plus a warning log.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping
from json import JSONDecodeError
from typing import Any, Protocol

import structlog

from resilient_client.predicates.document import JsonDocument
from resilient_client.predicates.response import ResponseLike

logger = structlog.get_logger(__name__)


class JsonNodeVerifier(Protocol):
    """Judges a parsed JSON document."""

    def verify(self, document: JsonDocument) -> bool:
        ...


def _as_document(document: Any) -> JsonDocument:
    return document if isinstance(document, JsonDocument) else JsonDocument(document)


class AbstractJsonNodeVerifier(ABC):
    """
    Base class for verifiers that inspect one node of the document.

    Resolves the optional sub-path and delegates to ``verify_node``. When
    the sub-path is missing the verification fails with a warning.

    Attributes:
        path: Sub-path of the node to verify (None for the root)
    """

    def __init__(self, path: str | None = None):
        self.path = path

    def verify(self, document: JsonDocument | Any) -> bool:
        document = _as_document(document)

        if self.path is None:
            logger.info("Verifying root JSON node", document=repr(document))
            return self.verify_node(document)

        logger.info("Verifying JSON node", path=self.path, document=repr(document))

        node = document.at(self.path)
        if node is None:
            logger.warning("JSON node to verify does not exist", path=self.path)
            return False

        return self.verify_node(node)

    @abstractmethod
    def verify_node(self, node: JsonDocument) -> bool:
        """
        Verify the resolved node.

        Args:
            node: Document rooted at the resolved sub-path

        Returns:
            True if the node passes verification
        """
        pass


class JsonNodeExistsVerifier:
    """Checks presence (or absence) of a node at a path."""

    def __init__(self, path: str, should_exist: bool = True):
        self.path = path
        self.should_exist = should_exist

    def verify(self, document: JsonDocument | Any) -> bool:
        exists = _as_document(document).exists(self.path)
        if exists != self.should_exist:
            logger.warning(
                "JSON node existence mismatch",
                path=self.path,
                should_exist=self.should_exist,
            )
            return False
        return True


class JsonNodeAttributesExistVerifier(AbstractJsonNodeVerifier):
    """
    Checks that a node has every listed field.

    All fields are checked so that every missing one is logged.
    """

    def __init__(self, attribute_names: Iterable[str], path: str | None = None):
        super().__init__(path)
        self.attribute_names = tuple(attribute_names)

    def verify_node(self, node: JsonDocument) -> bool:
        result = True

        for name in self.attribute_names:
            if not node.has(name):
                logger.warning("Attribute not found on JSON node", attribute=name, path=self.path)
                result = False

        return result


class JsonNodeWithAttributesVerifier(AbstractJsonNodeVerifier):
    """
    Checks that a node has the listed field values.

    Values are compared as text. Verification stops at the first missing
    or mismatching field, in mapping order.
    """

    def __init__(self, attribute_values: Mapping[str, str], path: str | None = None):
        super().__init__(path)
        self.attribute_values = dict(attribute_values)

    def verify_node(self, node: JsonDocument) -> bool:
        for name, expected in self.attribute_values.items():
            if not node.has(name):
                logger.warning(
                    "JSON node does not contain attribute",
                    attribute=name,
                    path=self.path,
                )
                return False

            actual = node.text(name)
            if actual != expected:
                logger.warning(
                    "JSON node attribute has unexpected value",
                    attribute=name,
                    expected=expected,
                    actual=actual,
                    path=self.path,
                )
                return False

        return True


# === Factories ===


def exists(path: str) -> JsonNodeVerifier:
    return JsonNodeExistsVerifier(path, should_exist=True)


def does_not_exist(path: str) -> JsonNodeVerifier:
    return JsonNodeExistsVerifier(path, should_exist=False)


def has_attributes(attribute_names: Iterable[str], path: str | None = None) -> JsonNodeVerifier:
    return JsonNodeAttributesExistVerifier(attribute_names, path)


def has_attribute_values(
    attribute_values: Mapping[str, str], path: str | None = None
) -> JsonNodeVerifier:
    return JsonNodeWithAttributesVerifier(attribute_values, path)


def json_predicate(verifier: JsonNodeVerifier) -> Callable[[ResponseLike], bool]:
    """
    Adapt a verifier into a response predicate.

    A body that is not valid JSON fails the predicate instead of raising,
    so the poll loop keeps going.
    """

    def predicate(response: ResponseLike) -> bool:
        try:
            document = JsonDocument.parse(response.text)
        except JSONDecodeError as e:
            logger.info("Error reading response body as JSON", error=str(e))
            return False
        return verifier.verify(document)

    return predicate
