"""
Tests for the LLM debug logger.
"""

import json

import pytest
from langchain_core.messages import AIMessage, HumanMessage

from conftest import FakeChatModel, code_reply
from prompt2app.pipeline.generation import AppGenerator
from prompt2app.utils.llm_logger import LLMLogger, LoggedLLM, LogLevel, get_logger


def test_logger_is_singleton():
    assert get_logger() is LLMLogger()


def test_unknown_level_falls_back_to_none(quiet_llm_logger):
    quiet_llm_logger.configure(level="chatty")
    assert quiet_llm_logger.level == LogLevel.NONE


def test_disabled_logging_calls_through(capsys):
    llm = LoggedLLM(FakeChatModel("hello"), component="generator", provider="openai", model="gpt-4o")
    response = llm.invoke([HumanMessage(content="hi")])
    assert response.content == "hello"
    assert capsys.readouterr().out == ""


def test_info_logging_writes_jsonl(tmp_path, capsys, quiet_llm_logger, calculator_html):
    quiet_llm_logger.configure(level="DEBUG", log_to_file=True, log_dir=str(tmp_path))
    llm = FakeChatModel(
        code_reply(calculator_html),
        usage={"input_tokens": 5, "output_tokens": 7, "total_tokens": 12},
    )

    document = AppGenerator(llm=llm).generate("a basic calculator")

    out = capsys.readouterr().out
    assert "LLM Call: [generator] openai/gpt-4o" in out
    assert "12 tokens" in out

    log_file = tmp_path / document.document_id / "logs" / "llm_calls.jsonl"
    entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert [e["event"] for e in entries] == ["request", "response"]
    assert entries[1]["usage"]["total_tokens"] == 12
    assert entries[1]["response"]["content_length"] == len(code_reply(calculator_html))


def test_errors_are_logged_and_reraised(tmp_path, capsys, quiet_llm_logger):
    quiet_llm_logger.configure(level="INFO", log_to_file=True, log_dir=str(tmp_path))
    llm = LoggedLLM(
        FakeChatModel(TimeoutError("slow")),
        component="generator", provider="openai", model="gpt-4o", document_id="app_x",
    )

    with pytest.raises(TimeoutError):
        llm.invoke([HumanMessage(content="hi")])

    assert "LLM Error: [generator] TimeoutError: slow" in capsys.readouterr().out
    entry = json.loads((tmp_path / "app_x" / "logs" / "llm_calls.jsonl").read_text(encoding="utf-8"))
    assert entry["event"] == "error"


def test_extract_usage_from_response_metadata():
    message = AIMessage(content="x", response_metadata={"token_usage": {
        "prompt_tokens": 3, "completion_tokens": 4, "total_tokens": 7,
    }})
    assert LLMLogger.extract_usage(message) == {
        "prompt_tokens": 3, "completion_tokens": 4, "total_tokens": 7,
    }
    assert LLMLogger.extract_usage(AIMessage(content="x")) == {}
