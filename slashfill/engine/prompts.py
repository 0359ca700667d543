"""System prompts and chat completion payloads."""

from datetime import date
from typing import Any

# =============================================================================
# System prompts
# =============================================================================

SYSTEM_PROMPT = """
You are an inline autocomplete for a note editor. The user's note is shown with [CURSOR] marking where they want text inserted.

Rules:
1. Return ONLY the word(s) that belong at [CURSOR]. Consider both the text before AND after the cursor to determine the right completion.
2. Word budget: 1-3 words is ideal. 4-5 words is rare. 6-10 words is extremely rare. Never exceed 10.
3. Use context to resolve pronouns (e.g., "known as" -> provide the name being referenced).
4. Use web search for facts when available, but strip all URLs, citations, and source references from your answer.
5. Output plain text only. No markdown, brackets, parentheses, or meta commentary.
6. Ensure grammatical continuity. The completion must flow from the preceding text and into the following text.
7. If unsure, return "".

Examples:
- "Igloo Australia, known as [CURSOR], recently joined" -> "Iggy Azalea"
- "The capital of France is [CURSOR]." -> "Paris"
- "She starred alongside [CURSOR] in the film" -> "Tom Hanks" (if context implies who)
"""

BATCH_FILL_PROMPT = """You fill in multiple blanks in a note. Blanks are marked [FILL_1], [FILL_2], etc.

CRITICAL RULES:
1. Return a JSON array with answers in order: ["answer1", "answer2", ...]
2. Each answer is 1-4 words. Be concise and specific.
3. EACH BLANK NEEDS A DIFFERENT, CONTEXTUALLY CORRECT ANSWER.
4. Read the FULL sentence to understand what each blank needs.
5. Use web search for factual accuracy.
6. Never repeat an answer. Never include text already in the note.
7. If a blank needs no text, use "" for it.

EXAMPLE INPUT:
"The Garden comprises of [FILL_1] and [FILL_2] Shears. They founded the record label [FILL_3] in [FILL_4]."

EXAMPLE OUTPUT:
["Wyatt", "Fletcher", "Vada Vada Records", "2016"]

Return ONLY the JSON array. No explanation.
"""

TITLE_PROMPT = (
    "You are a helpful assistant. Summarize the user's text into a short, concise "
    "title (3-5 words max). Do not use quotes. IMPORTANT: The title MUST be in the "
    "same language as the user's text. Match their language exactly."
)


def today_string(day: date | None = None) -> str:
    """Format a date the way the prompts expect it, e.g. ``Sat Oct 18 2026``."""
    return (day or date.today()).strftime("%a %b %d %Y")


def with_date(prompt: str, today: str | None) -> str:
    """Append today's date to a system prompt."""
    if not today:
        return prompt
    return f"{prompt.rstrip()}\nToday's date is {today}."


def build_payload(
    system_prompt: str,
    user_content: str,
    *,
    model: str,
    temperature: float,
    max_tokens: int,
    web_search: bool = False,
    web_search_max_results: int = 3,
) -> dict[str, Any]:
    """Build an OpenAI-style chat completion request body.

    Args:
        system_prompt: Instructions for the model.
        user_content: The note context or marked prompt.
        model: Model identifier, e.g. ``anthropic/claude-haiku-4.5``.
        temperature: Sampling temperature.
        max_tokens: Completion token cap.
        web_search: Add the OpenRouter web search plugin.
        web_search_max_results: Result cap for the web search plugin.

    Returns:
        The request payload.
    """
    payload: dict[str, Any] = {
        "model": model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_content},
        ],
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    if web_search:
        payload["plugins"] = [{"id": "web", "max_results": web_search_max_results}]
    return payload
