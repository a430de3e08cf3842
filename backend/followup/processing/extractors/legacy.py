"""Extractor for the legacy plan-metadata form."""

from __future__ import annotations

from xml.etree.ElementTree import Element

from followup.core.constants import SchemaVersionTag
from followup.models import AssistanceFlags, CanonicalFields
from followup.processing.extractors.base import (
    BaseExtractor,
    find_flag,
    find_optional_text,
    find_text,
)


class LegacyMetadataExtractor(BaseExtractor):
    """
    The legacy form is a flat metadata document rather than a Skjemainnhold
    tree.  A plan that asks for equipment assistance was not written on the
    NAV template, which uses_nav_template records.
    """

    def supports_tag(self, tag: SchemaVersionTag) -> bool:
        return tag == SchemaVersionTag.LEGACY_METADATA_FORM

    def extract(self, document: Element, archive_reference: str) -> CanonicalFields:
        equipment = find_flag(document, "bistandHjelpemidler")
        return CanonicalFields(
            archive_reference=archive_reference,
            sender_org_id=find_text(document, "arbeidsgiver/orgnr"),
            sender_org_name=find_text(document, "arbeidsgiver/navn"),
            sender_system_name=find_text(document, "avsenderSystem/systemNavn"),
            sender_system_version=find_text(document, "avsenderSystem/systemVersjon"),
            subject_person_id=find_text(document, "fodselsNr"),
            subject_given_name=find_optional_text(document, "fornavn"),
            subject_family_name=find_optional_text(document, "etternavn"),
            send_to_archive=find_flag(document, "mottaksinformasjon/oppfoelgingsplanSendesTiNav"),
            send_to_physician=find_flag(document, "mottaksinformasjon/oppfoelgingsplanSendesTilFastlege"),
            assistance=AssistanceFlags(
                equipment=equipment,
                guidance=find_flag(document, "bistandRaadOgVeiledning"),
                dialogue_meeting=find_flag(document, "bistandDialogMoeteMedNav"),
                employment_measures=find_flag(document, "bistandArbeidsrettedeTiltakOgVirkemidler"),
            ),
            uses_nav_template=not equipment,
        )
