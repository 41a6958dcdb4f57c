"""
Persistence and download packaging for generated documents.
"""

import json
from pathlib import Path
from typing import Union

from prompt2app.models import GeneratedDocument, SaveArtifact


def build_save_artifact(document: GeneratedDocument) -> SaveArtifact:
    """Offer the document exactly as generated, under the fixed file name."""
    return SaveArtifact(data=document.code)


class ArtifactManager:
    """Manages output artifacts and directory structure."""

    def __init__(self, output_dir: Union[str, Path] = "outputs"):
        """
        Initialize artifact manager.

        Args:
            output_dir: Root directory for generated documents.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def create_document_directory(self, document_id: str) -> Path:
        """
        Create output directory for a document.

        Args:
            document_id: Document identifier.

        Returns:
            Path to document directory.
        """
        document_dir = self.output_dir / document_id
        document_dir.mkdir(parents=True, exist_ok=True)
        (document_dir / "logs").mkdir(exist_ok=True)
        return document_dir

    def save_html(self, document_id: str, html_content: str, filename: str = "generated.html") -> Path:
        """
        Save generated HTML to disk.

        Args:
            document_id: Document identifier.
            html_content: HTML content to save.
            filename: Output filename.

        Returns:
            Path to saved HTML file.
        """
        document_dir = self.create_document_directory(document_id)
        html_path = document_dir / filename
        html_path.write_text(html_content, encoding="utf-8")
        return html_path

    def save_generation_log(self, document: GeneratedDocument) -> Path:
        """Write prompt, model and token usage next to the HTML."""
        document_dir = self.create_document_directory(document.document_id)
        metadata_path = document_dir / "generation_log.json"
        metadata = {
            "document_id": document.document_id,
            "prompt": document.prompt,
            "title": document.title,
            "timestamp": document.generation_timestamp.isoformat(),
            "model": document.model_name,
            "prompt_tokens": document.prompt_tokens,
            "completion_tokens": document.completion_tokens,
            "metadata": document.generation_metadata,
        }
        metadata_path.write_text(json.dumps(metadata, indent=2), encoding="utf-8")
        return metadata_path

    def load_html(self, document_id: str, filename: str = "generated.html") -> str:
        """
        Load generated HTML from disk.

        Args:
            document_id: Document identifier.
            filename: HTML filename.

        Returns:
            HTML content.
        """
        html_path = self.output_dir / document_id / filename
        if not html_path.exists():
            raise FileNotFoundError(f"HTML file not found: {html_path}")
        return html_path.read_text(encoding="utf-8")
