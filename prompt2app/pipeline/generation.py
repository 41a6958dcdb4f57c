"""
LangChain-based generation gateway: natural-language prompt in, single-file HTML app out.
"""

import json
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup
from langchain_anthropic import ChatAnthropic
from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI
from pydantic import ValidationError

from prompt2app.config import DEFAULT_MODELS
from prompt2app.exceptions import EmptyPromptError, GenerationError, Prompt2AppError
from prompt2app.io.artifacts import ArtifactManager
from prompt2app.models import (
    GenerateAppInput,
    GenerateAppOutput,
    GeneratedDocument,
    new_document_id,
)
from prompt2app.utils.llm_logger import LoggedLLM, LLMLogger


SYSTEM_PROMPT = """You are an expert and imaginative AI web app developer.
You always answer with a single JSON object of the form {{"code": "<html>"}} and nothing else."""


APP_PROMPT_TEMPLATE = """Your primary goal is to understand the *essence* of the user's request and generate a **fully functional, single-page web application** that not only meets the literal description but also anticipates and incorporates features that would make it a truly useful and well-designed app for the user. Think creatively and leverage your knowledge to build the best possible version of the app the user is imagining. This application will be embedded directly into an iframe using the `srcdoc` attribute, so it MUST be a single HTML file containing all necessary HTML, inline CSS, and inline JavaScript.

User Description: {prompt}

**Key Requirements for the Generated App:**
1.  **Functionality over Mockup:** The app should work as described. If the user asks for "a daily planner with voice reminders," the generated app must allow users to add tasks, set times, and **actually play voice reminders** at the set times using browser APIs like `window.speechSynthesis` and `SpeechSynthesisUtterance`.
2.  **Self-Contained:** All code (HTML, CSS, JavaScript) must be within the single HTML file. No external file references beyond absolute URLs for placeholder images (e.g., `https://placehold.co/300x200.png`).
3.  **Vanilla JavaScript & Browser APIs:** Use standard HTML5, CSS3, and vanilla JavaScript. Do not use any frameworks (React, Vue, Angular, etc.) or libraries unless their code can be fully inlined and is very concise. Prioritize direct use of browser APIs.
4.  **User Interface:**
    *   Create a clear, usable, and **highly interactive** user interface.
    *   Design a **visually appealing, colorful, and eye-catchy** layout. Make it modern and engaging.
    *   Select a **color palette and design elements that are contextually appropriate** for the app's purpose. Consider common design patterns and aesthetics from similar real-life applications to inform your choices.
    *   Ensure the interface is **mobile-friendly and responsive**.
5.  **Error Handling (Basic):** Include basic error handling or feedback where appropriate (e.g., if the browser doesn't support a required API).
6.  **No Server-Side Code:** The generated code must be entirely client-side.
7.  **Output Format:** Respond with a JSON object with exactly one key, "code". The "code" field must contain ONLY the complete HTML string, starting with <!DOCTYPE html>.

**Example Scenario for "a daily planner with voice reminders":**
   - The HTML should allow adding tasks with descriptions and due times (e.g., using `<input type="datetime-local">`).
   - JavaScript should manage these tasks, perhaps in an array of objects.
   - JavaScript should regularly check (e.g., using `setInterval`) if any task's due time has been reached.
   - When a task's due time is reached, JavaScript should use `window.speechSynthesis.speak(new SpeechSynthesisUtterance('Reminder for your task: [task description]'))` to provide an audible reminder.
   - The app should clearly indicate active reminders or upcoming tasks with an appealing visual design.
   - Consider providing a way to dismiss or mark tasks as complete.
   - Handle potential issues, like the browser not supporting speech synthesis, by providing a text fallback (e.g., an alert or a message on the page).
   - Persisting tasks (e.g., using `localStorage`) is a bonus if it can be implemented cleanly within the single file.

Generate the HTML code that brings the user's description to life as a working application preview. Ensure the JavaScript is robust enough to handle the described functionality and the CSS makes the app visually stunning and appropriate for its purpose."""


_FENCE_PATTERN = re.compile(r"^\s*```[a-zA-Z]*\s*\n(.*?)\n?\s*```\s*$", re.DOTALL)


class ResponseParser:
    """Parses LLM responses into the structured app output."""

    @staticmethod
    def response_text(response: Any) -> str:
        """
        Get the text of a chat model response.

        Args:
            response: AIMessage (or anything with `content`), or a plain string.

        Returns:
            Concatenated text content.
        """
        content = getattr(response, "content", response)
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            # Anthropic returns content blocks
            parts = []
            for block in content:
                if isinstance(block, str):
                    parts.append(block)
                elif isinstance(block, dict) and block.get("type") == "text":
                    parts.append(block.get("text", ""))
            return "".join(parts)
        if content is None:
            return ""
        return str(content)

    @staticmethod
    def strip_code_fence(text: str) -> str:
        """Remove a markdown code fence wrapping the whole response, if present."""
        match = _FENCE_PATTERN.match(text)
        if match:
            return match.group(1).strip()
        return text.strip()

    @classmethod
    def parse_output(cls, text: str) -> GenerateAppOutput:
        """
        Parse the model's JSON object into GenerateAppOutput.

        Args:
            text: Raw model response text.

        Returns:
            Validated output with a non-empty `code` string.

        Raises:
            GenerationError: If the response is not a JSON object with a non-empty string `code`.
        """
        body = cls.strip_code_fence(text)
        if not body:
            raise GenerationError("AI did not return any code.")

        # strict=False: HTML inside `code` often carries raw newlines and tabs
        try:
            payload = json.loads(body, strict=False)
        except json.JSONDecodeError:
            # Tolerate prose around the object
            start, end = body.find("{"), body.rfind("}")
            if start == -1 or end <= start:
                raise GenerationError("AI response was not a JSON object.")
            try:
                payload = json.loads(body[start:end + 1], strict=False)
            except json.JSONDecodeError as e:
                raise GenerationError("AI response was not a JSON object.") from e

        if not isinstance(payload, dict):
            raise GenerationError("AI response was not a JSON object.")

        try:
            output = GenerateAppOutput.model_validate(payload)
        except ValidationError as e:
            raise GenerationError("AI did not return any code.") from e

        if not output.code.strip():
            raise GenerationError("AI did not return any code.")

        return output

    @staticmethod
    def extract_title(html_content: str) -> Optional[str]:
        """Return the document's <title> text, if any."""
        soup = BeautifulSoup(html_content, "html.parser")
        if soup.title and soup.title.string:
            title = soup.title.string.strip()
            return title or None
        return None


class AppGenerator:
    """Generates a single self-contained HTML app from a natural-language prompt."""

    def __init__(
        self,
        provider: str = "openai",
        model_name: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 8192,
        api_key: Optional[str] = None,
        request_timeout: Optional[float] = None,
        llm: Optional[Any] = None,
    ):
        """
        Initialize the generator.

        Args:
            provider: LLM provider (openai or anthropic).
            model_name: Model name (optional, uses defaults).
            temperature: Generation temperature.
            max_tokens: Maximum tokens to generate.
            api_key: API key (optional, uses environment variable).
            request_timeout: Seconds to wait for the model; None waits indefinitely.
            llm: Pre-built chat model with an `invoke(messages)` method. Skips provider setup.
        """
        self.provider = provider.lower()
        if self.provider not in DEFAULT_MODELS:
            raise ValueError(f"Unsupported provider: {provider}")

        self.model_name = model_name or DEFAULT_MODELS[self.provider]
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.api_key = api_key
        self.request_timeout = request_timeout
        self.parser = ResponseParser()
        self.prompt_template = ChatPromptTemplate.from_messages([
            ("system", SYSTEM_PROMPT),
            ("human", APP_PROMPT_TEMPLATE),
        ])

        self._llm = llm
        self._injected = llm is not None

    @classmethod
    def from_settings(cls, settings, **overrides) -> "AppGenerator":
        """Build a generator from `Settings`, with keyword overrides."""
        provider = overrides.get("provider", settings.provider)
        api_key = (
            settings.openai_api_key
            if provider == "openai"
            else settings.anthropic_api_key
        )
        # A configured model name belongs to the configured provider only
        model_name = settings.model_name if provider == settings.provider else None
        kwargs = dict(
            provider=provider,
            model_name=model_name,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            api_key=api_key,
            request_timeout=settings.request_timeout,
        )
        kwargs.update(overrides)
        return cls(**kwargs)

    def _build_llm(self):
        # The gateway never retries; SDK-level retries are switched off too.
        kwargs = dict(
            model=self.model_name,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            timeout=self.request_timeout,
            max_retries=0,
        )
        if self.api_key:
            kwargs["api_key"] = self.api_key

        if self.provider == "openai":
            return ChatOpenAI(**kwargs)
        return ChatAnthropic(**kwargs)

    @property
    def llm(self):
        """The underlying chat model, created on first use."""
        if self._llm is None:
            self._llm = self._build_llm()
        return self._llm

    def _invoke_kwargs(self) -> Dict[str, Any]:
        if not self._injected and self.provider == "openai":
            return {"response_format": {"type": "json_object"}}
        return {}

    def create_messages(self, prompt: str) -> List:
        """
        Fill the fixed instruction template with the user's prompt.

        Args:
            prompt: User description.

        Returns:
            List of messages for the LLM.
        """
        return self.prompt_template.format_messages(prompt=prompt)

    def generate(self, prompt: str) -> GeneratedDocument:
        """
        Generate an HTML app from a prompt.

        Args:
            prompt: Natural-language description of the app.

        Returns:
            GeneratedDocument whose `code` is exactly the model's HTML string.

        Raises:
            EmptyPromptError: If the prompt is empty or whitespace (no request is made).
            GenerationError: On any model, network or output failure.
        """
        request = GenerateAppInput(prompt=prompt or "")
        if not request.prompt.strip():
            raise EmptyPromptError()

        document_id = new_document_id()
        messages = self.create_messages(request.prompt)

        try:
            llm = LoggedLLM(
                llm_instance=self.llm,
                component="generator",
                provider=self.provider,
                model=self.model_name,
                document_id=document_id,
                metadata={"temperature": self.temperature, "max_tokens": self.max_tokens},
            )
            response = llm.invoke(messages, **self._invoke_kwargs())
        except Prompt2AppError:
            raise
        except Exception as e:
            raise GenerationError(str(e) or GenerationError.default_message) from e

        output = self.parser.parse_output(self.parser.response_text(response))
        usage = LLMLogger.extract_usage(response)

        return GeneratedDocument(
            document_id=document_id,
            prompt=request.prompt,
            code=output.code,
            title=self.parser.extract_title(output.code),
            generation_timestamp=datetime.now(),
            model_name=self.model_name,
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
            generation_metadata={
                "provider": self.provider,
                "temperature": self.temperature,
                "max_tokens": self.max_tokens,
            },
        )

    def generate_and_save(
        self,
        prompt: str,
        output_dir: Path = Path("outputs"),
    ) -> Tuple[GeneratedDocument, Path]:
        """
        Generate an HTML app and save it to disk.

        Args:
            prompt: Natural-language description of the app.
            output_dir: Output directory root.

        Returns:
            Tuple of (GeneratedDocument, html_file_path).
        """
        generated = self.generate(prompt)

        artifact_manager = ArtifactManager(output_dir)
        html_path = artifact_manager.save_html(generated.document_id, generated.code)
        artifact_manager.save_generation_log(generated)

        return generated, html_path


def generate_app(prompt: str, **generator_kwargs) -> GenerateAppOutput:
    """Single request/response call: `{prompt}` in, `{code}` out."""
    document = AppGenerator(**generator_kwargs).generate(prompt)
    return GenerateAppOutput(code=document.code)
