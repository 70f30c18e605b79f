"""Anthropic client factory and generation configuration."""

from anthropic import AsyncAnthropic

GENERATION_MODEL = "claude-sonnet-4-5-20250929"

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2048

# Payload ceilings for the generation call
MAX_RECORDS_FOR_CONTEXT = 80
MAX_RECIPIENTS_FOR_PROMPT = 80


def get_anthropic_client(api_key: str | None = None) -> AsyncAnthropic:
    """Create an async Anthropic client.

    When *api_key* is ``None`` the constructor reads ``ANTHROPIC_API_KEY``
    from the environment.

    Args:
        api_key: The generation credential saved by the user, if any.

    Returns:
        Configured ``AsyncAnthropic`` instance.
    """
    if api_key:
        return AsyncAnthropic(api_key=api_key)
    return AsyncAnthropic()
