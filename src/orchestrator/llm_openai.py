"""
src/orchestrator/llm_openai.py

OpenAI client wrapper for function calling.
- to_messages(): conversation turns -> Chat Completions messages
- to_tool_specs(): registry tool definitions -> OpenAI function specs
- extract_tool_calls(): normalize tool calls from a response choice
- OpenAIChat: the completion callable the orchestrator loop talks to
"""


import json
import logging
from typing import Any, Dict, List, Optional
from openai import OpenAI

from config import DEFAULT_MODEL, openai_api_key
from orchestrator import prompts
from orchestrator.models import ContentBlock, TextBlock, ToolResultBlock, ToolUseBlock, Turn


logger = logging.getLogger(__name__)


def _tool_spec(name: str, description: str, parameters: Dict[str, Any]) -> Dict[str, Any]:
    """Build an OpenAI function spec."""

    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": {
                "type": "object",
                "properties": parameters.get("properties", {}),
                "required": parameters.get("required", []),
                "additionalProperties": False,
            },
        },
    }

def to_tool_specs(definitions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:

    return [_tool_spec(d["name"], d["description"], d["input_schema"]) for d in definitions]

def _assistant_message(turn: Turn) -> Dict[str, Any]:

    if isinstance(turn.content, str):
        return {"role": "assistant", "content": turn.content}

    text = "\n".join(b.text for b in turn.content if isinstance(b, TextBlock))
    tool_calls = [
        {
            "id": b.id,
            "type": "function",
            "function": {"name": b.name, "arguments": json.dumps(b.input, ensure_ascii=False)},
        }
        for b in turn.content if isinstance(b, ToolUseBlock)
    ]

    # A tool-less assistant message must carry a string
    msg: Dict[str, Any] = {"role": "assistant", "content": text or (None if tool_calls else "")}

    if tool_calls:
        msg["tool_calls"] = tool_calls

    return msg

def _user_messages(turn: Turn) -> List[Dict[str, Any]]:
    """Tool results become `tool` role messages; any text follows as a plain user message."""

    if isinstance(turn.content, str):
        return [{"role": "user", "content": turn.content}]

    out: List[Dict[str, Any]] = []
    texts: List[str] = []

    for b in turn.content:
        if isinstance(b, ToolResultBlock):
            content = f"[error] {b.content}" if b.is_error else b.content
            out.append({"role": "tool", "tool_call_id": b.tool_use_id, "content": content})
        elif isinstance(b, TextBlock):
            texts.append(b.text)

    if texts:
        out.append({"role": "user", "content": "\n".join(texts)})

    return out

def to_messages(turns: List[Turn], system_prompt: Optional[str] = None) -> List[Dict[str, Any]]:

    messages: List[Dict[str, Any]] = []

    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})

    for turn in turns:
        if turn.role == "assistant":
            messages.append(_assistant_message(turn))
        else:
            messages.extend(_user_messages(turn))

    return messages

def extract_tool_calls(choice) -> List[Dict[str, Any]]:
    """
    Normalize tool calls from the OpenAI response choice.
    """

    out = []
    tcs = getattr(choice.message, "tool_calls", None)

    if not tcs:
        return out

    for tc in tcs:
        if tc.type == "function" and tc.function:
            name = tc.function.name
            try:
                args = json.loads(tc.function.arguments or "{}")
            except json.JSONDecodeError:
                logger.warning("Unparsable arguments for tool call %s: %r", name, tc.function.arguments)
                args = {}
            if not isinstance(args, dict):
                args = {}
            out.append({"name": name, "arguments": args, "id": tc.id})

    return out

def to_blocks(choice) -> List[ContentBlock]:
    """Response choice -> ordered content blocks (text first, then action requests)."""

    blocks: List[ContentBlock] = []
    text = choice.message.content

    if text:
        blocks.append(TextBlock(text=text))

    for tc in extract_tool_calls(choice):
        blocks.append(ToolUseBlock(id=tc["id"], name=tc["name"], input=tc["arguments"]))

    return blocks


class OpenAIChat:
    """
    Completion endpoint backed by OpenAI Chat Completions.

    Call it with (turns, tool_definitions, max_tokens); it returns content blocks.
    Transport and API errors are not caught here.
    """

    def __init__(
            self,
            client: Optional[OpenAI] = None,
            *,
            model: str = DEFAULT_MODEL,
            system_prompt: str = prompts.SYSTEM_PROMPT,
            temperature: float = 0.2,
    ):

        self._client = client
        self.model = model
        self.system_prompt = system_prompt
        self.temperature = temperature

    @property
    def client(self) -> OpenAI:

        if self._client is None:
            self._client = OpenAI(api_key=openai_api_key())

        return self._client

    def call_model(self, messages: List[Dict[str, Any]], tools: Optional[List[Dict[str, Any]]], max_tokens: int):
        """
        Low-level call to OpenAI Chat Completions with optional tool specs.
        Returns the raw response object.
        """

        kwargs: Dict[str, Any] = {}
        if tools:
            kwargs["tools"] = tools
            kwargs["tool_choice"] = "auto"

        return self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=self.temperature,
            **kwargs,
        )

    def __call__(self, turns: List[Turn], tools: List[Dict[str, Any]], max_tokens: int) -> List[ContentBlock]:

        messages = to_messages(turns, self.system_prompt)
        resp = self.call_model(messages, to_tool_specs(tools), max_tokens)
        blocks = to_blocks(resp.choices[0])
        logger.debug("Model %s returned %d block(s)", self.model, len(blocks))

        return blocks
