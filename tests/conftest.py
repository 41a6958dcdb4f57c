"""
Shared fixtures: fake chat models and sample documents.
"""

import json

import pytest
from langchain_core.messages import AIMessage

from prompt2app.utils.llm_logger import get_logger


CALCULATOR_HTML = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>Basic Calculator</title>
<style>body { font-family: sans-serif; }</style></head>
<body><div id="display">0</div>
<script>document.getElementById("display").textContent = 1 + 1;</script>
</body></html>"""


class FakeChatModel:
    """Chat model double: replays queued replies (strings or exceptions)."""

    def __init__(self, *replies, usage=None):
        self.replies = list(replies)
        self.usage = usage
        self.calls = []
        self.kwargs = []

    def invoke(self, messages, **kwargs):
        self.calls.append(messages)
        self.kwargs.append(kwargs)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        if self.usage:
            return AIMessage(content=reply, usage_metadata=self.usage)
        return AIMessage(content=reply)


def code_reply(code: str) -> str:
    return json.dumps({"code": code})


@pytest.fixture
def calculator_html():
    return CALCULATOR_HTML


@pytest.fixture
def fake_llm():
    return FakeChatModel(code_reply(CALCULATOR_HTML))


@pytest.fixture(autouse=True)
def quiet_llm_logger():
    """Keep the singleton logger silent unless a test turns it on."""
    logger = get_logger()
    logger.configure(level="NONE", log_to_file=False)
    yield logger
    logger.configure(level="NONE", log_to_file=False)
