"""
Extractors for the 2012, 2014 and 2016 follow-up plan schemas.

The three schemas carry the same information under different element
paths, so one extractor class is parameterised with a FieldPaths table
per version.
"""

from __future__ import annotations

from dataclasses import dataclass
from xml.etree.ElementTree import Element

from followup.core.constants import SchemaVersionTag
from followup.models import AssistanceFlags, CanonicalFields
from followup.processing.extractors.base import (
    BaseExtractor,
    find_flag,
    find_optional_text,
    find_text,
)


@dataclass(frozen=True)
class FieldPaths:
    """Element paths (relative to the form root) for every canonical field."""

    sender_org_id: str
    sender_org_name: str
    sender_system_name: str
    sender_system_version: str
    subject_person_id: str
    subject_given_name: str
    subject_family_name: str
    send_to_archive: str
    send_to_physician: str
    assistance_equipment: str
    assistance_guidance: str
    assistance_dialogue_meeting: str
    assistance_employment_measures: str


PATHS_2012 = FieldPaths(
    sender_org_id="Skjemainnhold/bedrift/orgnr",
    sender_org_name="Skjemainnhold/bedrift/navn",
    sender_system_name="Skjemainnhold/avsenderSystem/systemNavn",
    sender_system_version="Skjemainnhold/avsenderSystem/systemVersjon",
    subject_person_id="Skjemainnhold/arbeidstaker/fnr",
    subject_given_name="Skjemainnhold/arbeidstaker/fornavn",
    subject_family_name="Skjemainnhold/arbeidstaker/etternavn",
    send_to_archive="Skjemainnhold/mottaksInformasjon/oppfolgingsplanSendesTiNav",
    send_to_physician="Skjemainnhold/mottaksInformasjon/oppfolgingsplanSendesTilFastlege",
    assistance_equipment="Skjemainnhold/bistand/hjelpemidler",
    assistance_guidance="Skjemainnhold/bistand/raadOgVeiledning",
    assistance_dialogue_meeting="Skjemainnhold/bistand/dialogMoeteMedNav",
    assistance_employment_measures="Skjemainnhold/bistand/arbeidsrettedeTiltakOgVirkemidler",
)

PATHS_2014 = FieldPaths(
    sender_org_id="Skjemainnhold/arbeidsgiver/orgnr",
    sender_org_name="Skjemainnhold/arbeidsgiver/navn",
    sender_system_name="Skjemainnhold/avsenderSystem/systemNavn",
    sender_system_version="Skjemainnhold/avsenderSystem/systemVersjon",
    subject_person_id="Skjemainnhold/sykmeldtArbeidstaker/fodselsnummer",
    subject_given_name="Skjemainnhold/sykmeldtArbeidstaker/fornavn",
    subject_family_name="Skjemainnhold/sykmeldtArbeidstaker/etternavn",
    send_to_archive="Skjemainnhold/mottaksInformasjon/oppfolgingsplanSendesTiNav",
    send_to_physician="Skjemainnhold/mottaksInformasjon/oppfolgingsplanSendesTilFastlege",
    assistance_equipment="Skjemainnhold/tiltak/bistandFraNav/hjelpemidler",
    assistance_guidance="Skjemainnhold/tiltak/bistandFraNav/raadOgVeiledning",
    assistance_dialogue_meeting="Skjemainnhold/tiltak/bistandFraNav/dialogMoeteMedNav",
    assistance_employment_measures="Skjemainnhold/tiltak/bistandFraNav/arbeidsrettedeTiltakOgVirkemidler",
)

PATHS_2016 = FieldPaths(
    sender_org_id="Skjemainnhold/arbeidsgiver/orgnr",
    sender_org_name="Skjemainnhold/arbeidsgiver/orgnavn",
    sender_system_name="Skjemainnhold/avsenderSystem/systemNavn",
    sender_system_version="Skjemainnhold/avsenderSystem/systemVersjon",
    subject_person_id="Skjemainnhold/sykmeldtArbeidstaker/fnr",
    subject_given_name="Skjemainnhold/sykmeldtArbeidstaker/fornavn",
    subject_family_name="Skjemainnhold/sykmeldtArbeidstaker/etternavn",
    send_to_archive="Skjemainnhold/mottaksInformasjon/oppfolgingsplanSendesTiNav",
    send_to_physician="Skjemainnhold/mottaksInformasjon/oppfolgingsplanSendesTilFastlege",
    assistance_equipment="Skjemainnhold/tiltak/bistand/bistandHjelpemidler",
    assistance_guidance="Skjemainnhold/tiltak/bistand/bistandRaadOgVeiledning",
    assistance_dialogue_meeting="Skjemainnhold/tiltak/bistand/bistandDialogMoeteMedNav",
    assistance_employment_measures="Skjemainnhold/tiltak/bistand/bistandArbeidsrettedeTiltakOgVirkemidler",
)


class VersionedFormExtractor(BaseExtractor):
    """Reads one of the versioned follow-up plan schemas via its FieldPaths."""

    def __init__(self, tag: SchemaVersionTag, paths: FieldPaths) -> None:
        self.tag = tag
        self.paths = paths

    def supports_tag(self, tag: SchemaVersionTag) -> bool:
        return tag == self.tag

    def extract(self, document: Element, archive_reference: str) -> CanonicalFields:
        p = self.paths
        return CanonicalFields(
            archive_reference=archive_reference,
            sender_org_id=find_text(document, p.sender_org_id),
            sender_org_name=find_text(document, p.sender_org_name),
            sender_system_name=find_text(document, p.sender_system_name),
            sender_system_version=find_text(document, p.sender_system_version),
            subject_person_id=find_text(document, p.subject_person_id),
            subject_given_name=find_optional_text(document, p.subject_given_name),
            subject_family_name=find_optional_text(document, p.subject_family_name),
            send_to_archive=find_flag(document, p.send_to_archive),
            send_to_physician=find_flag(document, p.send_to_physician),
            assistance=AssistanceFlags(
                equipment=find_flag(document, p.assistance_equipment),
                guidance=find_flag(document, p.assistance_guidance),
                dialogue_meeting=find_flag(document, p.assistance_dialogue_meeting),
                employment_measures=find_flag(document, p.assistance_employment_measures),
            ),
        )


def versioned_extractors() -> list[VersionedFormExtractor]:
    return [
        VersionedFormExtractor(SchemaVersionTag.V2012, PATHS_2012),
        VersionedFormExtractor(SchemaVersionTag.V2014, PATHS_2014),
        VersionedFormExtractor(SchemaVersionTag.V2016, PATHS_2016),
    ]
