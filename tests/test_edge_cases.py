"""Edge case tests for tagged tool call parsing.

Categories:
1. Nested Structures
2. Unicode & Special Characters
3. Injection Attempts
4. Large Inputs
"""

import pytest

from toolcall_engine.models import ParsedOutput
from toolcall_engine.parsers import TagParser


@pytest.fixture(params=[False, True], ids=["strict", "repair"])
def parser(request):
    """Parameterized fixture for strict and repairing parsers."""
    return TagParser(repair_json=request.param)


def tagged(payload: str) -> str:
    return f"<tool_call>{payload}</tool_call>"


# =============================================================================
# Category 1: Nested Structures
# =============================================================================

class TestNestedStructures:
    """Tests for deeply nested argument structures."""

    def test_depth_5(self, parser):
        """Test 5 levels of nesting."""
        result = parser.parse(tagged('{"name": "test", "arguments": {"l1": {"l2": {"l3": {"l4": {"l5": 1}}}}}}'))
        assert result.tool_call.arguments["l1"]["l2"]["l3"]["l4"]["l5"] == 1

    def test_depth_10(self, parser):
        """Test 10 levels of nesting."""
        nested = '{"deep": ' * 10 + '1' + '}' * 10
        result = parser.parse(tagged(f'{{"name": "test", "arguments": {nested}}}'))
        assert result.has_call

    def test_array_in_object(self, parser):
        """Test arrays nested in objects."""
        result = parser.parse(tagged('{"name": "test", "arguments": {"items": [{"a": 1}, {"b": 2}]}}'))
        assert result.tool_call.arguments["items"] == [{"a": 1}, {"b": 2}]

    def test_json_string_in_arguments(self, parser):
        """Test JSON string as argument value stays a string."""
        result = parser.parse(tagged('{"name": "test", "arguments": {"data": "{\\"nested\\": true}"}}'))
        assert result.tool_call.arguments["data"] == '{"nested": true}'


# =============================================================================
# Category 2: Unicode & Special Characters
# =============================================================================

class TestUnicodeSpecialChars:
    """Tests for unicode and special characters."""

    @pytest.mark.parametrize("value", [
        "👍",
        "👨‍👩‍👧‍👦",
        "你好世界",
        "مرحبا بالعالم",
        "こんにちは世界",
    ])
    def test_unicode_values(self, parser, value):
        """Test unicode argument values survive parsing."""
        result = parser.parse(tagged(f'{{"name": "test", "arguments": {{"text": "{value}"}}}}'))
        assert result.tool_call.arguments["text"] == value

    def test_unicode_prose(self, parser):
        """Test unicode prose around the marker is preserved."""
        text = "天気を調べます。" + tagged('{"name": "get_weather", "arguments": {"city": "東京"}}')
        result = parser.parse(text)
        assert result.text == "天気を調べます。"
        assert result.tool_call.arguments["city"] == "東京"

    def test_escape_sequences(self, parser):
        """Test JSON escape sequences."""
        result = parser.parse(tagged('{"name": "test", "arguments": {"text": "line1\\nline2\\ttab"}}'))
        assert result.tool_call.arguments["text"] == "line1\nline2\ttab"

    def test_braces_in_string(self, parser):
        """Test braces inside string values."""
        result = parser.parse(tagged('{"name": "test", "arguments": {"code": "if (x) { return; }"}}'))
        assert result.tool_call.arguments["code"] == "if (x) { return; }"


# =============================================================================
# Category 3: Injection Attempts
# =============================================================================

class TestInjectionAttempts:
    """Tests for payloads that try to confuse the parser."""

    def test_closing_tag_in_prose_before_call(self, parser):
        """Test a stray closing tag before the call."""
        text = "</tool_call> oops " + tagged('{"name": "ok", "arguments": {}}')
        result = parser.parse(text)
        assert result.tool_call.tool_name == "ok"
        assert result.text == "</tool_call> oops"

    def test_nested_opening_tag(self, parser):
        """Test a doubled opening tag still yields the inner call."""
        text = '<tool_call><tool_call>{"name": "x", "arguments": {}}</tool_call>'
        result = parser.parse(text)
        assert isinstance(result, ParsedOutput)
        assert result.tool_call.tool_name == "x"
        assert result.text == "<tool_call>"

    def test_script_in_argument(self, parser):
        """Test markup inside arguments is passed through as data."""
        result = parser.parse(tagged('{"name": "t", "arguments": {"q": "<script>alert(1)</script>"}}'))
        assert result.tool_call.arguments["q"] == "<script>alert(1)</script>"

    def test_name_with_spaces_rejected(self, parser):
        """Test whitespace-only names are not calls."""
        result = parser.parse(tagged('{"name": "   ", "arguments": {}}'))
        assert result.tool_call is None


# =============================================================================
# Category 4: Large Inputs
# =============================================================================

class TestLargeInputs:
    """Tests for large inputs."""

    def test_long_prose(self, parser):
        """Test a call after a long preamble."""
        prose = "word " * 5000
        result = parser.parse(prose + tagged('{"name": "t", "arguments": {}}'))
        assert result.tool_call.tool_name == "t"
        assert result.text == prose.strip()

    def test_many_arguments(self, parser):
        """Test an object with many keys."""
        args = ", ".join(f'"k{i}": {i}' for i in range(500))
        result = parser.parse(tagged(f'{{"name": "t", "arguments": {{{args}}}}}'))
        assert len(result.tool_call.arguments) == 500

    def test_many_markers(self, parser):
        """Test only the first of many markers is consumed."""
        text = "".join(tagged(f'{{"name": "t{i}", "arguments": {{}}}}') for i in range(100))
        result = parser.parse(text)
        assert result.tool_call.tool_name == "t0"
        assert len(parser.parse_all(result.text)) == 99
