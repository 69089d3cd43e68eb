"""AI Agents package."""

from shopledger.agents.insight_agent import (
    EMPTY_REPLY,
    FAILURE_REPLIES,
    SYSTEM_INSTRUCTION,
    InsightAgent,
    InsightFailure,
    classify_failure,
)
from shopledger.agents.providers import (
    CompletionClient,
    GeminiCompletionClient,
    OpenAICompletionClient,
    ProviderNotConfiguredError,
    create_completion_client,
)

__all__ = [
    "EMPTY_REPLY",
    "FAILURE_REPLIES",
    "SYSTEM_INSTRUCTION",
    "InsightAgent",
    "InsightFailure",
    "classify_failure",
    "CompletionClient",
    "GeminiCompletionClient",
    "OpenAICompletionClient",
    "ProviderNotConfiguredError",
    "create_completion_client",
]
