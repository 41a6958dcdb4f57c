"""
Tests for data models.
"""

import pytest
from pydantic import ValidationError

from prompt2app.models import (
    GenerateAppOutput,
    GeneratedDocument,
    Notification,
    NotificationLevel,
    SaveArtifact,
)


def test_generate_app_output_requires_string_code():
    assert GenerateAppOutput(code="<html></html>").code == "<html></html>"
    with pytest.raises(ValidationError):
        GenerateAppOutput.model_validate({})
    with pytest.raises(ValidationError):
        GenerateAppOutput.model_validate({"code": None})


def test_generated_document_defaults():
    document = GeneratedDocument(prompt="a basic calculator", code="<html></html>", model_name="gpt-4o")
    assert document.document_id.startswith("app_")
    assert document.title is None
    assert document.total_tokens is None


def test_generated_document_ids_are_unique():
    ids = {
        GeneratedDocument(prompt="p", code="c", model_name="m").document_id
        for _ in range(20)
    }
    assert len(ids) == 20


def test_total_tokens():
    document = GeneratedDocument(
        prompt="p", code="c", model_name="m",
        prompt_tokens=100, completion_tokens=250,
    )
    assert document.total_tokens == 350


def test_notification_constructors():
    assert Notification.error("Oops").level == NotificationLevel.ERROR
    assert Notification.success("Done", "ok").description == "ok"
    assert Notification.info("FYI").description == ""


def test_save_artifact_defaults():
    artifact = SaveArtifact(data="<html></html>")
    assert artifact.file_name == "prompt2app_preview.html"
    assert artifact.mime == "text/html"
