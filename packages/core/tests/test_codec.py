"""Tests for review blob serialization and legacy migration."""

import json
import logging

from sectionreview_core.codec import META_KEY, from_blob, to_blob
from sectionreview_core.models import Answer, ReviewRecord, ReviewsMeta, SubmissionHistoryEntry


def _make_state():
    records = {
        "legal-documents": ReviewRecord(
            reviewed=True,
            answer=Answer.NO,
            comments="Falta Nota Simple de la propiedad",
            has_issue=True,
            submitted_comments="Falta Nota Simple de la propiedad",
            snapshot={"doc_purchase_contract": "c.pdf", "doc_land_registry_note": None},
        ),
        "home-insurance": ReviewRecord(reviewed=True, answer=Answer.YES),
    }
    meta = ReviewsMeta(
        comments_submitted=True,
        comments_submitted_at="2026-03-01T10:00:00+00:00",
        history=[
            SubmissionHistoryEntry(
                section_id="legal-documents",
                section_title="Documentos Legales de la Propiedad",
                comments="Falta Nota Simple de la propiedad",
                submitted_at="2026-03-01T10:00:00+00:00",
                field_values={"doc_purchase_contract": "c.pdf", "doc_land_registry_note": None},
            )
        ],
    )
    return records, meta


class TestToBlob:
    def test_persisted_shape(self):
        records, meta = _make_state()
        blob = to_blob(records, meta)

        assert blob["legal-documents"] == {
            "reviewed": True,
            "isCorrect": False,
            "comments": "Falta Nota Simple de la propiedad",
            "hasIssue": True,
            "submittedComments": "Falta Nota Simple de la propiedad",
            "snapshot": {"doc_purchase_contract": "c.pdf", "doc_land_registry_note": None},
        }
        assert blob["home-insurance"]["isCorrect"] is True
        assert blob["home-insurance"]["snapshot"] is None
        assert blob[META_KEY]["commentsSubmitted"] is True
        assert blob[META_KEY]["commentsSubmittedAt"] == "2026-03-01T10:00:00+00:00"
        assert blob[META_KEY]["commentSubmissionHistory"][0]["sectionId"] == "legal-documents"
        assert blob[META_KEY]["commentSubmissionHistory"][0]["fieldValues"]["doc_purchase_contract"] == "c.pdf"

    def test_blob_is_json_serializable(self):
        records, meta = _make_state()
        json.dumps(to_blob(records, meta))

    def test_submitted_at_omitted_until_first_submission(self):
        blob = to_blob({}, ReviewsMeta())
        assert "commentsSubmittedAt" not in blob[META_KEY]
        assert blob[META_KEY]["commentSubmissionHistory"] == []

    def test_blob_does_not_alias_snapshot(self):
        records, meta = _make_state()
        blob = to_blob(records, meta)
        blob["legal-documents"]["snapshot"]["doc_purchase_contract"] = "changed.pdf"
        assert records["legal-documents"].snapshot["doc_purchase_contract"] == "c.pdf"


class TestFromBlob:
    def test_reads_back_written_state(self):
        records, meta = _make_state()
        loaded_records, loaded_meta = from_blob(json.dumps(to_blob(records, meta)))

        assert loaded_records == records
        assert loaded_meta == meta

    def test_legacy_completed_shape_derives_has_issue(self):
        legacy = {
            "legal-documents": {"reviewed": True, "isCorrect": False, "comments": "x", "completed": False},
            "home-insurance": {"reviewed": True, "isCorrect": True, "completed": True},
        }
        records, meta = from_blob(legacy)

        assert records["legal-documents"].has_issue is True
        assert records["home-insurance"].has_issue is False
        assert records["legal-documents"].submitted_comments is None
        assert records["legal-documents"].snapshot is None
        assert meta == ReviewsMeta()

    def test_missing_fields_defaulted(self):
        records, _ = from_blob({"legal-documents": {}})
        assert records["legal-documents"] == ReviewRecord()

    def test_malformed_record_dropped(self, caplog):
        with caplog.at_level(logging.WARNING):
            records, _ = from_blob({"legal-documents": "oops", "home-insurance": {"isCorrect": True}})
        assert list(records) == ["home-insurance"]
        assert "legal-documents" in caplog.text

    def test_unparseable_text_degrades_to_empty_state(self, caplog):
        with caplog.at_level(logging.WARNING):
            records, meta = from_blob("{broken")
        assert records == {}
        assert meta == ReviewsMeta()
        assert "unparseable" in caplog.text

    def test_none_and_empty_blob(self):
        assert from_blob(None) == ({}, ReviewsMeta())
        assert from_blob("") == ({}, ReviewsMeta())

    def test_non_dict_blob_degrades_to_empty_state(self):
        assert from_blob("[1, 2]") == ({}, ReviewsMeta())
