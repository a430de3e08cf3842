"""
Submission Classifier — maps envelope service/edition codes to a schema tag.
"""

from __future__ import annotations

from followup.core.constants import SchemaVersionTag
from followup.core.logging import get_logger

logger = get_logger(__name__)


def parse_classification_table(raw: dict[str, str]) -> dict[tuple[str, str], SchemaVersionTag]:
    """
    Turn the settings form {"<service>/<edition>": "<tag>"} into lookup keys.

    Raises ValueError on a malformed key or an unknown tag so a bad
    deployment fails at startup rather than misrouting plans.
    """
    table: dict[tuple[str, str], SchemaVersionTag] = {}
    for key, tag in raw.items():
        service_code, sep, edition_code = key.partition("/")
        if not sep or not service_code or not edition_code:
            raise ValueError(f"Classification key must be '<serviceCode>/<editionCode>', got {key!r}")
        table[(service_code, edition_code)] = SchemaVersionTag(tag)
    return table


class SubmissionClassifier:
    """
    Pure lookup of (service code, edition code) → SchemaVersionTag.

    Anything not in the table is UNCLASSIFIED and takes the
    archive-everything safety-net route.
    """

    def __init__(self, table: dict[tuple[str, str], SchemaVersionTag]) -> None:
        self._table = dict(table)

    @classmethod
    def from_settings(cls, raw: dict[str, str]) -> SubmissionClassifier:
        return cls(parse_classification_table(raw))

    def classify(self, service_code: str, edition_code: str) -> SchemaVersionTag:
        tag = self._table.get((service_code, edition_code))
        if tag is None:
            logger.info(
                "Unrecognised service/edition, using passthrough route",
                service_code=service_code,
                edition_code=edition_code,
            )
            return SchemaVersionTag.UNCLASSIFIED
        return tag

    @property
    def known_pairs(self) -> list[tuple[str, str]]:
        return list(self._table.keys())
