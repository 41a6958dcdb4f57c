"""
Tests for the sandboxed preview frame and artifact persistence.
"""

import html
import json

import pytest

from prompt2app.io.artifacts import ArtifactManager, build_save_artifact
from prompt2app.models import GeneratedDocument
from prompt2app.rendering.preview import PREVIEW_SANDBOX, build_preview_frame


def test_preview_frame_is_sandboxed(calculator_html):
    frame = build_preview_frame(calculator_html, height=420)

    assert frame.startswith("<iframe ")
    assert f'sandbox="{PREVIEW_SANDBOX}"' in frame
    assert "allow-scripts" in PREVIEW_SANDBOX
    assert "allow-same-origin" not in PREVIEW_SANDBOX
    assert "allow-top-navigation" not in PREVIEW_SANDBOX
    assert "height: 420px" in frame


def test_preview_frame_embeds_document_losslessly(calculator_html):
    frame = build_preview_frame(calculator_html)
    srcdoc = frame.split('srcdoc="', 1)[1].split('" title=', 1)[0]

    assert '"' not in srcdoc
    assert html.unescape(srcdoc) == calculator_html


def _document(code="<html><title>T</title></html>"):
    return GeneratedDocument(
        document_id="app_test",
        prompt="a basic calculator",
        code=code,
        title="T",
        model_name="gpt-4o",
        prompt_tokens=10,
        completion_tokens=20,
    )


def test_save_artifact_is_exact_copy():
    document = _document("<html>\n  exact  </html>")
    artifact = build_save_artifact(document)
    assert artifact.data == "<html>\n  exact  </html>"
    assert artifact.file_name == "prompt2app_preview.html"
    assert artifact.mime == "text/html"


def test_artifact_manager_roundtrip(tmp_path):
    manager = ArtifactManager(tmp_path / "outputs")
    document = _document()

    html_path = manager.save_html(document.document_id, document.code)
    log_path = manager.save_generation_log(document)

    assert html_path.parent == tmp_path / "outputs" / "app_test"
    assert (html_path.parent / "logs").is_dir()
    assert manager.load_html("app_test") == document.code

    log = json.loads(log_path.read_text(encoding="utf-8"))
    assert log["model"] == "gpt-4o"
    assert log["prompt_tokens"] == 10
    assert log["completion_tokens"] == 20


def test_load_missing_html(tmp_path):
    with pytest.raises(FileNotFoundError):
        ArtifactManager(tmp_path).load_html("nope")
