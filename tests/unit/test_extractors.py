"""Unit tests for the schema extractors."""

from __future__ import annotations

import pytest

from conftest import SENDER_ORG, SUBJECT_ID, form_2012, form_2014, form_2016, legacy_form
from followup.core.constants import SchemaVersionTag
from followup.models import AssistanceFlags, RawSubmission
from followup.pipeline.errors import ExtractionError
from followup.processing.extractors import SchemaExtractor

FLAG_COMBINATIONS = [(True, True), (True, False), (False, True), (False, False)]


def _submission(form_data: str) -> RawSubmission:
    return RawSubmission(
        service_code="2913",
        edition_code="4",
        archive_reference="AR1",
        form_data=form_data,
    )


@pytest.fixture
def extractor() -> SchemaExtractor:
    return SchemaExtractor()


class TestVersionedSchemas:

    @pytest.mark.parametrize(
        ("tag", "builder"),
        [
            (SchemaVersionTag.V2012, form_2012),
            (SchemaVersionTag.V2014, form_2014),
            (SchemaVersionTag.V2016, form_2016),
        ],
    )
    @pytest.mark.parametrize(("archive", "physician"), FLAG_COMBINATIONS)
    def test_intent_flags_are_read_exactly(self, extractor, tag, builder, archive, physician):
        fields = extractor.extract(_submission(builder(archive, physician)), tag)
        assert fields.send_to_archive is archive
        assert fields.send_to_physician is physician

    def test_2012_fields(self, extractor):
        fields = extractor.extract(_submission(form_2012(True, False)), SchemaVersionTag.V2012)
        assert fields.archive_reference == "AR1"
        assert fields.sender_org_id == SENDER_ORG
        assert fields.sender_org_name == "Bedrift AS"
        assert fields.sender_system_name == "Altinn"
        assert fields.sender_system_version == "1.0"
        assert fields.subject_person_id == SUBJECT_ID
        assert fields.subject_given_name == "Ola"
        assert fields.assistance == AssistanceFlags(
            equipment=True, guidance=False, dialogue_meeting=True, employment_measures=False
        )
        assert fields.uses_nav_template is True

    def test_2014_fields(self, extractor):
        fields = extractor.extract(_submission(form_2014(True, True)), SchemaVersionTag.V2014)
        assert fields.sender_org_id == SENDER_ORG
        assert fields.subject_person_id == SUBJECT_ID
        assert fields.subject_given_name is None
        assert fields.subject_family_name is None
        assert fields.assistance == AssistanceFlags(
            equipment=False, guidance=True, dialogue_meeting=False, employment_measures=True
        )

    def test_2016_fields(self, extractor):
        fields = extractor.extract(_submission(form_2016(False, True)), SchemaVersionTag.V2016)
        assert fields.sender_org_name == "Bedrift AS"
        assert fields.sender_system_name == "HR-system"
        assert fields.subject_given_name == "Kari"
        assert fields.subject_family_name == "Nordmann"
        assert fields.assistance.equipment is True
        assert fields.assistance.guidance is True

    def test_missing_flags_default_to_false(self, extractor):
        form = "<melding><Skjemainnhold><arbeidsgiver><orgnr>1</orgnr></arbeidsgiver></Skjemainnhold></melding>"
        fields = extractor.extract(_submission(form), SchemaVersionTag.V2016)
        assert fields.sender_org_id == "1"
        assert fields.send_to_archive is False
        assert fields.send_to_physician is False
        assert fields.assistance == AssistanceFlags()

    def test_malformed_xml_raises_extraction_error(self, extractor):
        with pytest.raises(ExtractionError):
            extractor.extract(_submission("<melding><Skjemainnhold>"), SchemaVersionTag.V2014)


class TestLegacyForm:

    @pytest.mark.parametrize(("archive", "physician"), FLAG_COMBINATIONS)
    def test_intent_flags_are_read_exactly(self, extractor, archive, physician):
        fields = extractor.extract(
            _submission(legacy_form(archive, physician)), SchemaVersionTag.LEGACY_METADATA_FORM
        )
        assert fields.send_to_archive is archive
        assert fields.send_to_physician is physician

    def test_fields(self, extractor):
        fields = extractor.extract(_submission(legacy_form(True, True)), SchemaVersionTag.LEGACY_METADATA_FORM)
        assert fields.sender_org_id == SENDER_ORG
        assert fields.subject_person_id == SUBJECT_ID
        assert fields.subject_given_name == "Per"
        assert fields.assistance.dialogue_meeting is True
        assert fields.uses_nav_template is True

    def test_equipment_request_means_not_on_nav_template(self, extractor):
        fields = extractor.extract(
            _submission(legacy_form(True, True, equipment=True)), SchemaVersionTag.LEGACY_METADATA_FORM
        )
        assert fields.assistance.equipment is True
        assert fields.uses_nav_template is False


class TestUnclassified:

    def test_passthrough_without_parsing(self, extractor):
        fields = extractor.extract(_submission("not xml at all"), SchemaVersionTag.UNCLASSIFIED)
        assert fields.archive_reference == "AR1"
        assert fields.sender_org_id == ""
        assert fields.send_to_archive is False
        assert fields.send_to_physician is False

    def test_no_extractor_registered(self, extractor):
        assert extractor.extractor_for(SchemaVersionTag.UNCLASSIFIED) is None
        assert extractor.extractor_for(SchemaVersionTag.V2012) is not None
