"""Shared test fixtures for the follow-up plan intake pipeline."""

from __future__ import annotations

import base64
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pytest

from followup.core.config import DEFAULT_CLASSIFICATION_TABLE
from followup.core.constants import PdfType, SchemaVersionTag
from followup.dispatch import (
    ArchiveDispatcher,
    BenefitsNotificationDispatcher,
    DispatchCoordinator,
    LetterDispatcher,
    PhysicianNotificationDispatcher,
)
from followup.models import (
    AssistanceFlags,
    CanonicalFields,
    CommunicationParty,
    OfficeAddress,
    OrganizationSummary,
    PartnerCapability,
    PhysicianAssociation,
    RawSubmission,
)
from followup.pipeline.engine import PipelineEngine
from followup.pipeline.errors import RemoteServiceError
from followup.pipeline.flow_resolver import FlowResolver, PipelineServices
from followup.processing.classifier import SubmissionClassifier
from followup.processing.extractors import SchemaExtractor

SENDER_ORG = "910067494"
SUBJECT_ID = "01017012345"
OFFICE_ORG = "974600951"
OFFICE_REGISTRY_ID = "86751"
RENDERED_PDF = b"%PDF-1.4 rendered"


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------


class FakeOrganizationRegistry:
    def __init__(self) -> None:
        self.valid = True
        self.validation_error: Exception | None = None
        self.names: dict[str, str] = {SENDER_ORG: "Bedrift AS"}
        self.summaries: list[OrganizationSummary] = [
            OrganizationSummary(name="Bedrift AS", postal_code="0150", city="OSLO"),
        ]
        self.calls: list[tuple[str, str]] = []

    async def validate_organization(self, organization_number: str) -> bool:
        self.calls.append(("validate", organization_number))
        if self.validation_error is not None:
            raise self.validation_error
        return self.valid

    async def get_organization_name(self, organization_number: str) -> str:
        self.calls.append(("name", organization_number))
        return self.names.get(organization_number, "")

    async def find_organizations(self, name: str) -> list[OrganizationSummary]:
        self.calls.append(("find", name))
        return list(self.summaries)


class FakePhysicianRegistry:
    def __init__(self) -> None:
        self.association: PhysicianAssociation | None = PhysicianAssociation(
            first_name="Lege",
            last_name="Legesen",
            registry_id="123456",
            hpr_number="9876543",
            office=OfficeAddress(
                organization_number=OFFICE_ORG,
                name="Legekontoret",
                postal_code="5003",
                city="BERGEN",
            ),
        )
        self.error: Exception | None = None
        self.calls: list[str] = []

    async def get_association(self, person_id: str) -> PhysicianAssociation | None:
        self.calls.append(person_id)
        if self.error is not None:
            raise self.error
        return self.association


class FakeAddressRegistry:
    def __init__(self) -> None:
        self.parties = [
            CommunicationParty(
                registry_id=OFFICE_REGISTRY_ID,
                organization_number=OFFICE_ORG,
                name="Legekontoret",
            ),
        ]
        self.error: Exception | None = None
        self.calls: list[str] = []

    async def get_communication_parties(self, registry_id: str) -> list[CommunicationParty]:
        self.calls.append(registry_id)
        if self.error is not None:
            raise self.error
        return list(self.parties)


class FakePartnerDirectory:
    def __init__(self) -> None:
        self.partners = [PartnerCapability(partner_id="14859", registry_id=OFFICE_REGISTRY_ID)]
        self.calls: list[str] = []

    async def find_partners(self, organization_number: str) -> list[PartnerCapability]:
        self.calls.append(organization_number)
        return list(self.partners)


class FakeDocumentProduction:
    def __init__(self) -> None:
        self.error: Exception | None = None
        self.requests: list[dict[str, Any]] = []

    async def produce_letter(self, request: dict[str, Any]) -> dict[str, Any]:
        if self.error is not None:
            raise self.error
        self.requests.append(request)
        return {"status": "produced"}


class FakeArchiveService:
    def __init__(self) -> None:
        self.error: Exception | None = None
        self.requests: list[dict[str, Any]] = []

    async def archive(self, request: dict[str, Any]) -> dict[str, Any]:
        if self.error is not None:
            raise self.error
        self.requests.append(request)
        return {"journalpostId": "jp-1"}


class FakePdfRenderer:
    def __init__(self) -> None:
        self.error: Exception | None = None
        self.rendered: list[tuple[PdfType, dict[str, Any]]] = []

    async def render(self, pdf_type: PdfType, domain_object: dict[str, Any]) -> bytes:
        if self.error is not None:
            raise self.error
        self.rendered.append((pdf_type, domain_object))
        return RENDERED_PDF


class FakeChannel:
    def __init__(self, name: str) -> None:
        self.name = name
        self.error: Exception | None = None
        self.messages: list[dict[str, Any]] = []

    @property
    def channel_name(self) -> str:
        return self.name

    async def send(self, message: dict[str, Any]) -> None:
        if self.error is not None:
            raise self.error
        self.messages.append(message)


@dataclass
class Fakes:
    """Every collaborator of one wired pipeline."""

    organizations: FakeOrganizationRegistry = field(default_factory=FakeOrganizationRegistry)
    physicians: FakePhysicianRegistry = field(default_factory=FakePhysicianRegistry)
    addresses: FakeAddressRegistry = field(default_factory=FakeAddressRegistry)
    partners: FakePartnerDirectory = field(default_factory=FakePartnerDirectory)
    document_production: FakeDocumentProduction = field(default_factory=FakeDocumentProduction)
    archive: FakeArchiveService = field(default_factory=FakeArchiveService)
    pdf: FakePdfRenderer = field(default_factory=FakePdfRenderer)
    benefits_channel: FakeChannel = field(default_factory=lambda: FakeChannel("benefits"))
    physician_channel: FakeChannel = field(default_factory=lambda: FakeChannel("physician"))

    def downstream_calls(self) -> int:
        return (
            len(self.archive.requests)
            + len(self.document_production.requests)
            + len(self.benefits_channel.messages)
            + len(self.physician_channel.messages)
            + len(self.pdf.rendered)
        )


def remote_failure(service: str = "remote", status_code: int = 500) -> RemoteServiceError:
    return RemoteServiceError(f"{service} returned {status_code}", service=service, status_code=status_code)


@pytest.fixture
def fakes() -> Fakes:
    """Provide a fresh set of in-memory collaborators."""
    return Fakes()


# ---------------------------------------------------------------------------
# Dispatchers and engine wired to the fakes
# ---------------------------------------------------------------------------


@pytest.fixture
def letter_dispatcher(fakes: Fakes) -> LetterDispatcher:
    return LetterDispatcher(
        fakes.organizations,
        fakes.physicians,
        fakes.document_production,
        fakes.benefits_channel,
        placeholder_content="<TEST></TEST>",
    )


@pytest.fixture
def physician_dispatcher(fakes: Fakes, letter_dispatcher: LetterDispatcher) -> PhysicianNotificationDispatcher:
    return PhysicianNotificationDispatcher(
        fakes.physicians,
        fakes.addresses,
        fakes.partners,
        fakes.pdf,
        fakes.physician_channel,
        letter_dispatcher,
    )


@pytest.fixture
def coordinator(
    fakes: Fakes,
    letter_dispatcher: LetterDispatcher,
    physician_dispatcher: PhysicianNotificationDispatcher,
) -> DispatchCoordinator:
    return DispatchCoordinator([
        ArchiveDispatcher(fakes.archive, fakes.pdf),
        BenefitsNotificationDispatcher(fakes.benefits_channel),
        physician_dispatcher,
        letter_dispatcher,
    ])


@pytest.fixture
def classifier() -> SubmissionClassifier:
    return SubmissionClassifier.from_settings(DEFAULT_CLASSIFICATION_TABLE)


@pytest.fixture
def engine(fakes: Fakes, coordinator: DispatchCoordinator, classifier: SubmissionClassifier) -> PipelineEngine:
    """Provide a PipelineEngine whose every collaborator is a fake."""
    services = PipelineServices(
        extractor=SchemaExtractor(),
        organizations=fakes.organizations,
        coordinator=coordinator,
    )
    return PipelineEngine(classifier, FlowResolver(services))


# ---------------------------------------------------------------------------
# Form and submission factories
# ---------------------------------------------------------------------------


def _flag(value: bool) -> str:
    return "true" if value else "false"


def form_2012(send_to_archive: bool, send_to_physician: bool, org: str = SENDER_ORG) -> str:
    return f"""<melding xmlns="http://seres.no/xsd/NAV/Oppfolgingsplan_M/2012">
  <Skjemainnhold>
    <bedrift><orgnr>{org}</orgnr><navn>Bedrift AS</navn></bedrift>
    <avsenderSystem><systemNavn>Altinn</systemNavn><systemVersjon>1.0</systemVersjon></avsenderSystem>
    <arbeidstaker><fnr>{SUBJECT_ID}</fnr><fornavn>Ola</fornavn><etternavn>Nordmann</etternavn></arbeidstaker>
    <mottaksInformasjon>
      <oppfolgingsplanSendesTiNav>{_flag(send_to_archive)}</oppfolgingsplanSendesTiNav>
      <oppfolgingsplanSendesTilFastlege>{_flag(send_to_physician)}</oppfolgingsplanSendesTilFastlege>
    </mottaksInformasjon>
    <bistand>
      <hjelpemidler>true</hjelpemidler>
      <raadOgVeiledning>false</raadOgVeiledning>
      <dialogMoeteMedNav>true</dialogMoeteMedNav>
      <arbeidsrettedeTiltakOgVirkemidler>false</arbeidsrettedeTiltakOgVirkemidler>
    </bistand>
  </Skjemainnhold>
</melding>"""


def form_2014(send_to_archive: bool, send_to_physician: bool, org: str = SENDER_ORG) -> str:
    return f"""<melding xmlns="http://seres.no/xsd/NAV/Oppfolgingsplan_M/2014">
  <Skjemainnhold>
    <arbeidsgiver><orgnr>{org}</orgnr><navn>Bedrift AS</navn></arbeidsgiver>
    <avsenderSystem><systemNavn>Altinn</systemNavn><systemVersjon>2.0</systemVersjon></avsenderSystem>
    <sykmeldtArbeidstaker><fodselsnummer>{SUBJECT_ID}</fodselsnummer></sykmeldtArbeidstaker>
    <mottaksInformasjon>
      <oppfolgingsplanSendesTiNav>{_flag(send_to_archive)}</oppfolgingsplanSendesTiNav>
      <oppfolgingsplanSendesTilFastlege>{_flag(send_to_physician)}</oppfolgingsplanSendesTilFastlege>
    </mottaksInformasjon>
    <tiltak>
      <bistandFraNav>
        <hjelpemidler>false</hjelpemidler>
        <raadOgVeiledning>true</raadOgVeiledning>
        <dialogMoeteMedNav>false</dialogMoeteMedNav>
        <arbeidsrettedeTiltakOgVirkemidler>true</arbeidsrettedeTiltakOgVirkemidler>
      </bistandFraNav>
    </tiltak>
  </Skjemainnhold>
</melding>"""


def form_2016(send_to_archive: bool, send_to_physician: bool, org: str = SENDER_ORG) -> str:
    return f"""<melding xmlns="http://seres.no/xsd/NAV/Oppfolgingsplan_M/2016">
  <Skjemainnhold>
    <arbeidsgiver><orgnr>{org}</orgnr><orgnavn>Bedrift AS</orgnavn></arbeidsgiver>
    <avsenderSystem><systemNavn>HR-system</systemNavn><systemVersjon>3.1</systemVersjon></avsenderSystem>
    <sykmeldtArbeidstaker>
      <fnr>{SUBJECT_ID}</fnr><fornavn>Kari</fornavn><etternavn>Nordmann</etternavn>
    </sykmeldtArbeidstaker>
    <mottaksInformasjon>
      <oppfolgingsplanSendesTiNav>{_flag(send_to_archive)}</oppfolgingsplanSendesTiNav>
      <oppfolgingsplanSendesTilFastlege>{_flag(send_to_physician)}</oppfolgingsplanSendesTilFastlege>
    </mottaksInformasjon>
    <tiltak>
      <bistand>
        <bistandHjelpemidler>true</bistandHjelpemidler>
        <bistandRaadOgVeiledning>true</bistandRaadOgVeiledning>
        <bistandDialogMoeteMedNav>false</bistandDialogMoeteMedNav>
        <bistandArbeidsrettedeTiltakOgVirkemidler>false</bistandArbeidsrettedeTiltakOgVirkemidler>
      </bistand>
    </tiltak>
  </Skjemainnhold>
</melding>"""


def legacy_form(send_to_archive: bool, send_to_physician: bool, equipment: bool = False) -> str:
    return f"""<Oppfoelgingsplan4UtfyllendeInfoM>
  <arbeidsgiver><orgnr>{SENDER_ORG}</orgnr><navn>Bedrift AS</navn></arbeidsgiver>
  <avsenderSystem><systemNavn>Altinn</systemNavn><systemVersjon>4.0</systemVersjon></avsenderSystem>
  <fodselsNr>{SUBJECT_ID}</fodselsNr>
  <fornavn>Per</fornavn>
  <etternavn>Hansen</etternavn>
  <mottaksinformasjon>
    <oppfoelgingsplanSendesTiNav>{_flag(send_to_archive)}</oppfoelgingsplanSendesTiNav>
    <oppfoelgingsplanSendesTilFastlege>{_flag(send_to_physician)}</oppfoelgingsplanSendesTilFastlege>
  </mottaksinformasjon>
  <bistandHjelpemidler>{_flag(equipment)}</bistandHjelpemidler>
  <bistandRaadOgVeiledning>false</bistandRaadOgVeiledning>
  <bistandDialogMoeteMedNav>true</bistandDialogMoeteMedNav>
  <bistandArbeidsrettedeTiltakOgVirkemidler>false</bistandArbeidsrettedeTiltakOgVirkemidler>
</Oppfoelgingsplan4UtfyllendeInfoM>"""


FORM_BUILDERS: dict[SchemaVersionTag, Callable[..., str]] = {
    SchemaVersionTag.V2012: form_2012,
    SchemaVersionTag.V2014: form_2014,
    SchemaVersionTag.V2016: form_2016,
}

ENVELOPE_CODES: dict[SchemaVersionTag, tuple[str, str]] = {
    SchemaVersionTag.V2012: ("2913", "2"),
    SchemaVersionTag.V2014: ("2913", "3"),
    SchemaVersionTag.V2016: ("2913", "4"),
    SchemaVersionTag.LEGACY_METADATA_FORM: ("5062", "1"),
    SchemaVersionTag.UNCLASSIFIED: ("9999", "9"),
}


@pytest.fixture
def make_submission() -> Callable[..., RawSubmission]:
    """Factory fixture: build a RawSubmission for a tag with sensible defaults."""

    def _factory(
        tag: SchemaVersionTag = SchemaVersionTag.V2016,
        send_to_archive: bool = True,
        send_to_physician: bool = True,
        form_data: str | None = None,
        attachment: bytes = b"%PDF-1.4 attached",
        archive_reference: str = "AR123456",
    ) -> RawSubmission:
        service_code, edition_code = ENVELOPE_CODES[tag]
        if form_data is None:
            if tag == SchemaVersionTag.LEGACY_METADATA_FORM:
                form_data = legacy_form(send_to_archive, send_to_physician)
            elif tag in FORM_BUILDERS:
                form_data = FORM_BUILDERS[tag](send_to_archive, send_to_physician)
            else:
                form_data = "<ukjent/>"
        return RawSubmission(
            service_code=service_code,
            edition_code=edition_code,
            archive_reference=archive_reference,
            form_data=form_data,
            attachment=attachment,
            topic="privat-altinn-paop-Mottatt",
            partition=0,
        )

    return _factory


@pytest.fixture
def make_record(make_submission) -> Callable[..., dict[str, Any]]:
    """Factory fixture: the broker payload form of a submission."""

    def _factory(**overrides: Any) -> dict[str, Any]:
        submission = make_submission(**overrides)
        return {
            "serviceCode": submission.service_code,
            "serviceEditionCode": submission.edition_code,
            "archiveReference": submission.archive_reference,
            "formData": submission.form_data,
            "attachment": base64.b64encode(submission.attachment).decode("ascii"),
        }

    return _factory


@pytest.fixture
def make_fields() -> Callable[..., CanonicalFields]:
    """Factory fixture: CanonicalFields with sensible defaults."""

    def _factory(**overrides: Any) -> CanonicalFields:
        defaults: dict[str, Any] = {
            "archive_reference": "AR123456",
            "sender_org_id": SENDER_ORG,
            "sender_org_name": "Bedrift AS",
            "sender_system_name": "HR-system",
            "sender_system_version": "3.1",
            "subject_person_id": SUBJECT_ID,
            "send_to_archive": True,
            "send_to_physician": True,
            "assistance": AssistanceFlags(equipment=True),
            "subject_given_name": "Kari",
            "subject_family_name": "Nordmann",
        }
        defaults.update(overrides)
        return CanonicalFields(**defaults)

    return _factory
