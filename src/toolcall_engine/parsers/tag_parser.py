"""Parser for tool calls wrapped in <tool_call>...</tool_call> markers."""

import json
import logging
import re
from collections.abc import Iterator
from typing import Any

from pydantic import ValidationError

from toolcall_engine.models import ParsedOutput, ToolCall
from toolcall_engine.parsers.base import BaseParser

logger = logging.getLogger(__name__)

DEFAULT_START_TAG = "<tool_call>"
DEFAULT_END_TAG = "</tool_call>"


class TagParser(BaseParser):
    """Extracts Hermes-style tagged tool calls from model output.

    The expected payload between the markers is a single JSON object:
    ``{"name": "<tool>", "arguments": {...}}``. Only the first well-formed
    marker pair is consumed per parse; later pairs remain in the residual
    text so they can be handled in a later round. A pair whose payload does
    not decode is left in the text verbatim.

    Attributes:
        start_tag: Opening marker.
        end_tag: Closing marker.
        repair_json: Attempt to fix common JSON defects (single quotes,
            trailing commas, unbalanced braces) before rejecting a payload.
    """

    def __init__(
        self,
        start_tag: str = DEFAULT_START_TAG,
        end_tag: str = DEFAULT_END_TAG,
        repair_json: bool = False,
    ):
        if not start_tag or not end_tag:
            raise ValueError("Marker tags must be non-empty")
        self.start_tag = start_tag
        self.end_tag = end_tag
        self.repair_json = repair_json

    @property
    def name(self) -> str:
        """Return the parser identifier."""
        return "tag-parser"

    def parse(self, text: str) -> ParsedOutput:
        """Parse text and extract the first well-formed tool call.

        Args:
            text: Raw model output potentially containing tool call markers.

        Returns:
            ParsedOutput with the call and the text minus the consumed marker.
        """
        text = text or ""
        for start, end, call in self._scan(text):
            residual = text[:start] + text[end:]
            logger.debug(f"Parsed tool call: {call.tool_name}")
            return ParsedOutput(tool_call=call, text=residual.strip())

        return ParsedOutput(tool_call=None, text=text.strip())

    def parse_all(self, text: str) -> list[ToolCall]:
        """Return every well-formed tool call in text, in order."""
        return [call for _, _, call in self._scan(text or "")]

    def _scan(self, text: str) -> Iterator[tuple[int, int, ToolCall]]:
        """Yield (start, end, call) for each well-formed marker pair.

        Every opening tag is tried against the closing tag that follows it.
        When the enclosed payload does not decode, scanning resumes at the
        next opening tag, so an unclosed or broken marker cannot hide a
        well-formed one that comes after it.
        """
        pos = 0
        while True:
            start = text.find(self.start_tag, pos)
            if start == -1:
                return
            payload_start = start + len(self.start_tag)
            close = text.find(self.end_tag, payload_start)
            if close == -1:
                return

            call = self._decode_payload(text[payload_start:close])
            if call is None:
                logger.debug(f"Ignoring malformed tool call payload at offset {start}")
                pos = start + 1
                continue

            end = close + len(self.end_tag)
            yield start, end, call
            pos = end

    def _decode_payload(self, content: str) -> ToolCall | None:
        """Decode a marker payload, returning None if it is not a tool call."""
        data = self._load_json(content.strip())
        if not self._is_tool_call(data):
            return None

        arguments = data.get("arguments")
        if arguments is None:
            arguments = {}
        elif isinstance(arguments, str):
            arguments = self._load_json(arguments)
            if not isinstance(arguments, dict):
                return None
        elif not isinstance(arguments, dict):
            return None

        try:
            return ToolCall(tool_name=data["name"], arguments=arguments)
        except ValidationError:
            return None

    def _is_tool_call(self, data: Any) -> bool:
        """Check if data matches tool call structure."""
        return (
            isinstance(data, dict) and
            "name" in data and
            isinstance(data.get("name"), str)
        )

    def _load_json(self, text: str) -> Any:
        """Decode JSON, applying repairs first if enabled. Returns None on failure."""
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            pass

        if not self.repair_json:
            return None

        try:
            return json.loads(self._fix_malformed_json(text))
        except json.JSONDecodeError:
            return None

    def _fix_malformed_json(self, text: str) -> str:
        """Attempt to fix common JSON syntax errors."""
        fixed = self._convert_single_to_double_quotes(text)
        fixed = re.sub(r',\s*}', '}', fixed)
        fixed = re.sub(r',\s*]', ']', fixed)

        open_braces = fixed.count('{')
        close_braces = fixed.count('}')
        if open_braces > close_braces:
            fixed += '}' * (open_braces - close_braces)

        return fixed

    def _convert_single_to_double_quotes(self, text: str) -> str:
        """Convert single-quoted strings to double-quoted ones."""
        result = []
        in_string = False
        string_char = None

        for i, char in enumerate(text):
            if char in ('"', "'") and (i == 0 or text[i - 1] != '\\'):
                if not in_string:
                    in_string = True
                    string_char = char
                    result.append('"')
                elif char == string_char:
                    in_string = False
                    string_char = None
                    result.append('"')
                elif char == '"':
                    # bare double quote inside a single-quoted string
                    result.append('\\"')
                else:
                    result.append(char)
            else:
                result.append(char)

        return ''.join(result)
