"""
LLM Debug Logger for tracking model API calls.

Supports configurable log levels (NONE, INFO, DEBUG, TRACE) and dual output:
- Console: Human-readable formatted output
- File: JSON Lines format for parsing and analysis
"""

import json
import os
import time
import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv


class LogLevel(Enum):
    """Logging levels for LLM debug output."""

    NONE = 0
    INFO = 1
    DEBUG = 2
    TRACE = 3


class LLMLogger:
    """Centralized logger for LLM API calls with configurable levels."""

    _instance: Optional["LLMLogger"] = None

    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the logger with configuration from environment."""
        if self._initialized:
            return

        load_dotenv()
        self.configure(
            level=os.getenv("LLM_DEBUG_LEVEL", "NONE"),
            log_to_file=os.getenv("LLM_LOG_TO_FILE", "true").lower() == "true",
            log_dir=os.getenv("LLM_LOG_DIR", "outputs"),
        )
        self._initialized = True

    def configure(self, level: str, log_to_file: bool = True, log_dir: str = "outputs"):
        """Reconfigure the logger at runtime (unknown levels fall back to NONE)."""
        try:
            self.level = LogLevel[level.upper()]
        except KeyError:
            self.level = LogLevel.NONE
        self.log_to_file = log_to_file
        self.log_dir = Path(log_dir)

    def should_log(self, min_level: LogLevel) -> bool:
        return self.level.value >= min_level.value

    def _timestamp(self) -> str:
        return datetime.now().isoformat()

    @staticmethod
    def truncate(content: str, max_len: int = 200) -> str:
        """Truncate content for preview."""
        if len(content) <= max_len:
            return content
        return content[:max_len] + "... [truncated]"

    @staticmethod
    def _content_of(obj: Any) -> str:
        content = getattr(obj, "content", obj)
        if isinstance(content, str):
            return content
        if isinstance(content, (list, dict)):
            return json.dumps(content, indent=2, ensure_ascii=False)
        return str(content)

    def _serialize_message(self, msg: Any) -> Dict[str, Any]:
        return {"type": msg.__class__.__name__, "content": self._content_of(msg)}

    @staticmethod
    def extract_usage(response: Any) -> Dict[str, Optional[int]]:
        """
        Pull token usage out of a chat model response.

        LangChain messages expose `usage_metadata` (input/output/total tokens);
        older integrations only fill `response_metadata["usage"]`.
        """
        usage_metadata = getattr(response, "usage_metadata", None)
        if usage_metadata:
            return {
                "prompt_tokens": usage_metadata.get("input_tokens"),
                "completion_tokens": usage_metadata.get("output_tokens"),
                "total_tokens": usage_metadata.get("total_tokens"),
            }

        response_metadata = getattr(response, "response_metadata", None) or {}
        usage = response_metadata.get("usage") or response_metadata.get("token_usage") or {}
        if not usage:
            return {}
        return {
            "prompt_tokens": usage.get("prompt_tokens", usage.get("input_tokens")),
            "completion_tokens": usage.get("completion_tokens", usage.get("output_tokens")),
            "total_tokens": usage.get("total_tokens"),
        }

    def _write_to_file(self, document_id: Optional[str], log_entry: Dict[str, Any]):
        """Append a log entry to the document's JSON Lines file."""
        if not self.log_to_file or not document_id:
            return

        log_file = self.log_dir / document_id / "logs" / "llm_calls.jsonl"
        log_file.parent.mkdir(parents=True, exist_ok=True)

        with open(log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(log_entry, ensure_ascii=False) + "\n")

    def log_invocation(
        self,
        component: str,
        provider: str,
        model: str,
        document_id: Optional[str] = None,
    ) -> str:
        """
        Log the start of an LLM invocation.

        Returns:
            Invocation ID (UUID string), or "" when logging is disabled.
        """
        if not self.should_log(LogLevel.INFO):
            return ""

        invocation_id = str(uuid.uuid4())
        console_msg = f"[{self._timestamp()}] 🔵 LLM Call: [{component}] {provider}/{model}"
        if document_id:
            console_msg += f" | document_id: {document_id}"
        print(console_msg)
        return invocation_id

    def log_request(
        self,
        invocation_id: str,
        component: str,
        provider: str,
        model: str,
        messages: List[Any],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        document_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """Log request details (DEBUG and above)."""
        if not self.should_log(LogLevel.DEBUG):
            return

        print(f"  Messages: {len(messages)}")
        for i, msg in enumerate(messages[:3]):
            preview = self.truncate(self._content_of(msg), 150)
            print(f"    {i+1}. [{msg.__class__.__name__}] {preview}")

        log_entry = {
            "timestamp": self._timestamp(),
            "level": self.level.name,
            "event": "request",
            "component": component,
            "invocation_id": invocation_id,
            "provider": provider,
            "model": model,
            "document_id": document_id,
            "request": {
                "messages": (
                    [self._serialize_message(m) for m in messages]
                    if self.level == LogLevel.TRACE
                    else []
                ),
                "message_count": len(messages),
                "temperature": temperature,
                "max_tokens": max_tokens,
            },
            "metadata": metadata or {},
        }
        self._write_to_file(document_id, log_entry)

    def log_response(
        self,
        invocation_id: str,
        component: str,
        provider: str,
        model: str,
        response: Any,
        start_time: float,
        end_time: float,
        document_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """Log the response with latency and token usage."""
        if not self.should_log(LogLevel.INFO):
            return

        latency_ms = (end_time - start_time) * 1000
        content = self._content_of(response)
        usage = self.extract_usage(response)

        parts = [f"[{component}]", f"{provider}/{model}", f"{latency_ms:.1f}ms"]
        if usage.get("total_tokens") is not None:
            parts.append(f"{usage['total_tokens']} tokens")
        print(f"[{self._timestamp()}] ✅ LLM Response: " + " | ".join(parts))

        if self.should_log(LogLevel.DEBUG):
            print(f"  Response: {self.truncate(content, 200)}")

        if self.should_log(LogLevel.TRACE):
            print("  RESPONSE:")
            for line in content.split("\n"):
                print(f"    {line}")

        log_entry = {
            "timestamp": self._timestamp(),
            "level": self.level.name,
            "event": "response",
            "component": component,
            "invocation_id": invocation_id,
            "provider": provider,
            "model": model,
            "document_id": document_id,
            "response": {
                "content": content if self.level == LogLevel.TRACE else None,
                "content_preview": (
                    self.truncate(content, 200)
                    if self.should_log(LogLevel.DEBUG)
                    else None
                ),
                "content_length": len(content),
            },
            "timing": {
                "latency_ms": latency_ms,
                "start_time": datetime.fromtimestamp(start_time).isoformat(),
                "end_time": datetime.fromtimestamp(end_time).isoformat(),
            },
            "usage": usage or None,
            "metadata": metadata or {},
        }
        self._write_to_file(document_id, log_entry)

    def log_error(self, component: str, error: Exception, document_id: Optional[str] = None):
        if not self.should_log(LogLevel.INFO):
            return
        print(f"[{self._timestamp()}] ❌ LLM Error: [{component}] {type(error).__name__}: {error}")
        self._write_to_file(document_id, {
            "timestamp": self._timestamp(),
            "level": self.level.name,
            "event": "error",
            "component": component,
            "document_id": document_id,
            "error": {"type": type(error).__name__, "message": str(error)},
        })


def get_logger() -> LLMLogger:
    """Get the singleton logger instance."""
    return LLMLogger()


class LoggedLLM:
    """
    Wrapper around LangChain chat models to add debug logging.

    Intercepts invoke() calls and logs requests, responses, timing, and metadata.
    """

    def __init__(
        self,
        llm_instance: Any,
        component: str,
        provider: str,
        model: str,
        document_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize LoggedLLM wrapper.

        Args:
            llm_instance: The actual chat model (ChatOpenAI, ChatAnthropic or any
                object with an invoke() method).
            component: Component name (e.g., "generator").
            provider: Provider name ("openai" or "anthropic").
            model: Model name.
            document_id: Optional document ID for per-document log files.
            metadata: Optional additional metadata to include in logs.
        """
        self.llm = llm_instance
        self.component = component
        self.provider = provider
        self.model = model
        self.document_id = document_id
        self.metadata = metadata or {}
        self.logger = get_logger()

    def __getattr__(self, name: str):
        """Delegate all other attributes to wrapped LLM instance."""
        return getattr(self.llm, name)

    def invoke(self, messages: List[Any], **kwargs) -> Any:
        invocation_id = self.logger.log_invocation(
            component=self.component,
            provider=self.provider,
            model=self.model,
            document_id=self.document_id,
        )

        if not invocation_id:
            return self.llm.invoke(messages, **kwargs)

        start_time = time.time()
        self.logger.log_request(
            invocation_id=invocation_id,
            component=self.component,
            provider=self.provider,
            model=self.model,
            messages=messages,
            temperature=getattr(self.llm, "temperature", None),
            max_tokens=getattr(self.llm, "max_tokens", None),
            document_id=self.document_id,
            metadata=self.metadata,
        )

        try:
            response = self.llm.invoke(messages, **kwargs)
        except Exception as e:
            self.logger.log_error(self.component, e, document_id=self.document_id)
            raise

        self.logger.log_response(
            invocation_id=invocation_id,
            component=self.component,
            provider=self.provider,
            model=self.model,
            response=response,
            start_time=start_time,
            end_time=time.time(),
            document_id=self.document_id,
            metadata=self.metadata,
        )

        return response
