"""
prompts.py

Prompt text for the chat relay and the summarizers.

Default seed: used by /chat when the request has no history and no usable
template. Summary prompts: built per request from a rendered transcript.
"""

from __future__ import annotations

from typing import Optional

# ============================================================================
# Chat relay
# ============================================================================

DEFAULT_SEED_SYSTEM = "You are a poet."
DEFAULT_SEED_USER   = "Please write a short poem of about 50 characters."

# Bedrock rejects a conversation that does not open with a user turn
CONVERSATION_OPENER = "Please begin."


# ============================================================================
# Summaries
# ============================================================================

SUMMARIZER_SYSTEM = "You are an expert at summarization."

ROLE_LABELS = {
    "user":      "User",
    "assistant": "AI",
}
OTHER_ROLE_LABEL = "System"


def build_session_summary_prompt(
    transcript:  str,
    language:    str,
    title:       Optional[str] = None,
    description: Optional[str] = None,
    with_context: bool = False,
) -> str:
    """
    ~100-character summary from the user's point of view: what they feel, what
    they want, and the concrete next step they intend to take.
    """
    text = (
        "Summarize the following conversation log from the user's perspective. "
        "Emphasise what the user feels, what they want, and what concrete next step "
        f"they intend to take. Write about 100 characters in {language}.\n\n"
        f"Conversation log:\n{transcript}\n"
    )
    if with_context:
        text += (
            "\nTemplate information:\n"
            f"Title: {title or ''}\n"
            f"Description: {description or ''}\n"
        )
    text += (
        f"\nReturn only the summary, about 100 characters in {language}. "
        "No notes or commentary."
    )
    return text


def build_quick_summary_prompt(transcript: str, language: str) -> str:
    """~50-character summary that keeps the key points."""
    return (
        "Summarize the following conversation log so that its key points are clear, "
        f"in about 50 characters of {language}.\n\n"
        f"Conversation log:\n{transcript}\n"
        f"\nReturn only the summary, about 50 characters in {language}. No commentary."
    )
