"""
Abstract base class for all form extractors, plus the namespace-agnostic
XML lookups they share.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from xml.etree.ElementTree import Element

from followup.core.constants import SchemaVersionTag
from followup.models import CanonicalFields

TRUE_VALUES = frozenset({"true", "1", "yes"})


def local_name(tag: str) -> str:
    """Strip a '{namespace}' prefix from an element tag."""
    return tag.rsplit("}", 1)[-1]


def find_element(root: Element, path: str) -> Element | None:
    """
    Walk a '/'-separated path of local element names below root.

    Namespaces are ignored; the first matching child wins at each level.
    """
    node = root
    for part in path.split("/"):
        node = next((child for child in node if local_name(child.tag) == part), None)
        if node is None:
            return None
    return node


def find_text(root: Element, path: str, default: str = "") -> str:
    node = find_element(root, path)
    if node is None or node.text is None:
        return default
    return node.text.strip()


def find_optional_text(root: Element, path: str) -> str | None:
    value = find_text(root, path)
    return value or None


def find_flag(root: Element, path: str) -> bool:
    """Missing or empty nodes read as False."""
    return find_text(root, path).lower() in TRUE_VALUES


class BaseExtractor(ABC):
    """Base interface for schema-specific extractors."""

    @abstractmethod
    def extract(self, document: Element, archive_reference: str) -> CanonicalFields:
        """Read canonical fields from an already-parsed form document."""
        ...

    @abstractmethod
    def supports_tag(self, tag: SchemaVersionTag) -> bool:
        """Return True if this extractor handles the given schema tag."""
        ...
