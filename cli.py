#!/usr/bin/env python3
"""
Command-line interface for Prompt2App.
"""

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from prompt2app.config import Settings
from prompt2app.io.artifacts import ArtifactManager
from prompt2app.models import NotificationLevel
from prompt2app.pipeline.generation import AppGenerator
from prompt2app.shell.controller import ShellController
from prompt2app.shell.dictation import get_recognizer

# Load environment variables
load_dotenv()


def _print_notifications(controller: ShellController) -> bool:
    """Print queued notifications; True if any was an error."""
    failed = False
    for note in controller.drain_notifications():
        icon = "❌" if note.level == NotificationLevel.ERROR else "ℹ️ "
        print(f"{icon} {note.title}: {note.description}", file=sys.stderr)
        failed = failed or note.level == NotificationLevel.ERROR
    return failed


def _read_prompt(args) -> str:
    if args.prompt_file:
        prompt_path = Path(args.prompt_file)
        if not prompt_path.exists():
            raise FileNotFoundError(f"Prompt file not found: {prompt_path}")
        return prompt_path.read_text(encoding="utf-8").strip()
    return args.prompt or ""


def cmd_generate(args):
    """Generate a single-file HTML app from a prompt."""
    settings = Settings.from_env()

    generator = AppGenerator.from_settings(
        settings,
        provider=args.provider or settings.provider,
        model_name=args.model,
        temperature=args.temperature if args.temperature is not None else settings.temperature,
        max_tokens=args.max_tokens or settings.max_tokens,
    )
    recognizer = get_recognizer(settings) if args.voice else None
    controller = ShellController(generator=generator, recognizer=recognizer)
    controller.prompt = _read_prompt(args)

    if args.voice:
        audio_path = Path(args.voice)
        if not audio_path.exists():
            print(f"❌ Error: Audio file not found: {audio_path}", file=sys.stderr)
            return 1
        print(f"🎙️  Transcribing {audio_path}...", file=sys.stderr)
        if controller.start_dictation():
            controller.finish_dictation(audio_path.read_bytes(), filename=audio_path.name)
        if _print_notifications(controller):
            return 1

    print(f"📝 Prompt: {controller.prompt}", file=sys.stderr)
    print(f"🤖 Using {generator.provider}/{generator.model_name}", file=sys.stderr)
    print("🚀 Generating app...", file=sys.stderr)

    document = controller.generate()
    if _print_notifications(controller) or document is None:
        return 1

    print("✅ App generated successfully!", file=sys.stderr)
    if document.title:
        print(f"🏷️  Title: {document.title}", file=sys.stderr)
    if document.total_tokens is not None:
        print(f"📊 Tokens: {document.prompt_tokens} prompt, {document.completion_tokens} completion", file=sys.stderr)

    if args.stdout:
        print(document.code)
        return 0

    artifact_manager = ArtifactManager(args.output or settings.output_dir)
    html_path = artifact_manager.save_html(document.document_id, document.code)
    artifact_manager.save_generation_log(document)
    print(f"📄 HTML: {html_path}", file=sys.stderr)
    return 0


def cmd_transcribe(args):
    """Transcribe a recorded utterance (what dictation would append to the prompt)."""
    audio_path = Path(args.audio)
    if not audio_path.exists():
        print(f"❌ Error: Audio file not found: {audio_path}", file=sys.stderr)
        return 1

    controller = ShellController(generator=None, recognizer=get_recognizer(Settings.from_env()))
    if not controller.start_dictation():
        _print_notifications(controller)
        return 1

    transcript = controller.finish_dictation(audio_path.read_bytes(), filename=audio_path.name)
    if _print_notifications(controller) or transcript is None:
        return 1

    print(transcript)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Prompt2App: natural-language prompt to single-file HTML app",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate command
    gen_parser = subparsers.add_parser("generate", help="Generate an HTML app from a prompt")
    prompt_group = gen_parser.add_mutually_exclusive_group()
    prompt_group.add_argument("--prompt", help="App description")
    prompt_group.add_argument("--prompt-file", help="Path to a text file containing the app description")
    gen_parser.add_argument("--voice", help="Audio file whose transcript is appended to the prompt")
    gen_parser.add_argument("--output", "-o", help="Output directory (default: APPGEN_OUTPUT_DIR or outputs)")
    gen_parser.add_argument("--stdout", action="store_true", help="Print the HTML instead of saving it")
    gen_parser.add_argument("--provider", "-p", choices=["openai", "anthropic"])
    gen_parser.add_argument("--model", help="Model name (default: provider default)")
    gen_parser.add_argument("--temperature", type=float, help="Generation temperature")
    gen_parser.add_argument("--max-tokens", type=int, help="Maximum tokens")

    # Transcribe command
    tr_parser = subparsers.add_parser("transcribe", help="Transcribe an audio file for use as a prompt")
    tr_parser.add_argument("audio", help="Path to the audio file")

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == "generate":
            return cmd_generate(args)
        elif args.command == "transcribe":
            return cmd_transcribe(args)
    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"\n❌ Error: {str(e)}", file=sys.stderr)
        return 1
    return 1


if __name__ == "__main__":
    sys.exit(main())
