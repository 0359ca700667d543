"""Unit tests for prompt context building and the spacing rule."""

from slashfill.engine.context import (
    CURSOR_MARKER,
    LOADING_GLYPH,
    build_batch_context,
    build_inline_context,
    marked_source,
)
from slashfill.engine.prompts import build_payload, today_string, with_date
from slashfill.engine.spacing import apply_spacing


# =============================================================================
# Inline Context Tests
# =============================================================================


class TestInlineContext:
    """Test suite for build_inline_context."""

    def test_cursor_between_prefix_and_suffix(self):
        """Test the cursor marker placement."""
        context = build_inline_context("The capital is ", " and more")
        assert context.prompt == "The capital is " + CURSOR_MARKER + " and more"

    def test_windows_bound_the_prompt(self):
        """Test that only the tail of the prefix and head of the suffix are kept."""
        context = build_inline_context("a" * 2000 + "END", "START" + "b" * 1000)
        assert context.prefix.endswith("END")
        assert len(context.prefix) == 1500
        assert context.suffix.startswith("START")
        assert len(context.suffix) == 500

    def test_zero_prefix_window(self):
        """Test that a zero window drops the prefix entirely."""
        assert build_inline_context("abc", "def", prefix_window=0).prefix == ""


# =============================================================================
# Batch Context Tests
# =============================================================================


class TestBatchContext:
    """Test suite for build_batch_context."""

    def test_marked_source_includes_trigger(self):
        """Test that the trigger becomes the last blank before the suffix."""
        source, positions = marked_source("Born in / and raised in /.", "")
        assert source == "Born in / and raised in /./"
        assert positions == [8, 24, 26]

    def test_marked_source_shifts_suffix_blanks(self):
        """Test that suffix blanks move past the inserted trigger marker."""
        source, positions = marked_source("A /.", " B /.")
        assert source == "A /./ B /."
        assert positions == [2, 4, 8]

    def test_marked_source_without_trigger(self):
        """Test filling blanks only."""
        source, positions = marked_source("Born in /.", "", include_trigger=False)
        assert source == "Born in /."
        assert positions == [8]

    def test_single_blank(self):
        """Test Scenario A's prompt, base text and anchors."""
        context = build_batch_context("The capital of France is /.", "")

        assert context.prompt == "The capital of France is [FILL_1].[FILL_2]"
        assert context.base_text == "The capital of France is ."
        assert context.anchors == (25, 26)
        assert context.blank_count == 2

    def test_two_blanks(self):
        """Test numbered tokens and marker-free base text."""
        context = build_batch_context("Born in / and raised in /.", "")

        assert context.prompt == "Born in [FILL_1] and raised in [FILL_2].[FILL_3]"
        assert context.base_text == "Born in  and raised in ."
        assert context.anchors == (8, 23, 24)

    def test_no_blanks(self):
        """Test that text without blanks produces no anchors."""
        context = build_batch_context("Nothing here.", "", include_trigger=False)
        assert context.blank_count == 0
        assert context.base_text == "Nothing here."

    def test_loading_text(self):
        """Test that loading glyphs sit at every anchor."""
        context = build_batch_context("Born in / and raised in /.", "")
        assert context.loading_text == f"Born in {LOADING_GLYPH} and raised in {LOADING_GLYPH}.{LOADING_GLYPH}"

    def test_prompt_is_bounded_around_blanks(self):
        """Test that long documents are cut far from the blanks."""
        prefix = "x" * 5000 + " Born in /."
        suffix = " " + "y" * 5000
        context = build_batch_context(prefix, suffix, limit=1000)

        assert len(context.prompt) <= 1000
        assert "[FILL_1]" in context.prompt
        assert "[FILL_2]" in context.prompt
        assert context.base_text == "x" * 5000 + " Born in ." + suffix

    def test_base_text_length_law(self):
        """Test that the base text is the source minus one character per blank."""
        context = build_batch_context("a / b / c", " d / e")
        assert len(context.base_text) == len(context.source) - context.blank_count


# =============================================================================
# Spacing Tests
# =============================================================================


class TestSpacing:
    """Test suite for apply_spacing."""

    def test_spaces_between_words(self):
        """Test that an answer gets a space on both sides."""
        splice = apply_spacing("Born in", "Paris", "and raised")
        assert splice.text == "Born in Paris and raised"

    def test_collapses_existing_spaces(self):
        """Test that spaces around the insertion point are not doubled."""
        splice = apply_spacing("Born in ", "Paris", " and raised")
        assert splice.text == "Born in Paris and raised"

    def test_no_space_before_punctuation(self):
        """Test that closing punctuation follows the answer directly."""
        assert apply_spacing("is ", "Paris", ".").text == "is Paris."
        assert apply_spacing("is ", "Paris", ", then").text == "is Paris, then"

    def test_no_space_after_opening_bracket(self):
        """Test that an opening bracket is followed directly by the answer."""
        assert apply_spacing("city (", "Paris", ")").text == "city (Paris)"

    def test_empty_sides(self):
        """Test that empty neighbours add no spaces."""
        assert apply_spacing("", "Paris", "").text == "Paris"

    def test_newlines_are_kept(self):
        """Test that newlines around the insertion point survive."""
        assert apply_spacing("Title\n", "Paris", "\nNext").text == "Title\nParis\nNext"


# =============================================================================
# Payload Tests
# =============================================================================


class TestPayload:
    """Test suite for chat completion payloads."""

    def test_payload_shape(self):
        """Test the request body layout."""
        payload = build_payload(
            "system", "user", model="m", temperature=0.1, max_tokens=256
        )
        assert payload["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "user"},
        ]
        assert payload["temperature"] == 0.1
        assert payload["max_tokens"] == 256
        assert "plugins" not in payload

    def test_web_search_plugin(self):
        """Test the web search augmentation flag."""
        payload = build_payload(
            "s", "u", model="m", temperature=0.2, max_tokens=64, web_search=True
        )
        assert payload["plugins"] == [{"id": "web", "max_results": 3}]

    def test_with_date(self):
        """Test that the date is appended to a prompt."""
        from datetime import date

        today = today_string(date(2026, 10, 18))
        assert today == "Sun Oct 18 2026"
        assert with_date("Prompt\n", today) == "Prompt\nToday's date is Sun Oct 18 2026."
        assert with_date("Prompt", None) == "Prompt"
