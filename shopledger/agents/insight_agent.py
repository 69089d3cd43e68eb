"""
Insight Agent for Shop Ledger

CRITICAL BOUNDARIES:

- CAN: Give business advice grounded in the shop context it is handed
- CANNOT: Read storage. It only sees the bounded ShopContext.
- CANNOT: Fail the request. Every provider error becomes one of a
  fixed set of apologetic replies, and the chat endpoint still
  answers 200.

One request per question. No retries, no backoff. The call is bounded
by LLM_TIMEOUT_SECONDS.
"""

import asyncio
from enum import Enum
from typing import Optional

from shopledger.billing import format_amount
from shopledger.config import AppSettings, LLMSettings, get_settings
from shopledger.models.insight import ShopContext
from shopledger.agents.providers import CompletionClient, create_completion_client
from shopledger.telemetry import get_logger


logger = get_logger(__name__)


SYSTEM_INSTRUCTION = (
    "You are a helpful business assistant for a shop owner's bookkeeping "
    "dashboard. You only give advice about the shop's finances, based on the "
    "shop data you are given. If a question is not related to the shop's "
    "financial information, politely explain that you can only help with that."
)


class InsightFailure(str, Enum):
    """How a provider call went wrong, as far as the user is concerned."""
    QUOTA_EXCEEDED = "quota_exceeded"
    RATE_LIMITED = "rate_limited"
    AUTHENTICATION = "authentication"
    UNAVAILABLE = "unavailable"


FAILURE_REPLIES: dict[InsightFailure, str] = {
    InsightFailure.QUOTA_EXCEEDED: (
        "I apologize, but the AI service is currently unavailable due to quota "
        "limits. Your shop data has been analyzed, but the AI couldn't generate "
        "personalized insights. Please try again later or contact support to "
        "upgrade your plan."
    ),
    InsightFailure.RATE_LIMITED: (
        "The AI service is experiencing high demand right now. "
        "Please try again in a few moments."
    ),
    InsightFailure.AUTHENTICATION: (
        "There seems to be an authentication issue with the AI service. "
        "Please contact support."
    ),
    InsightFailure.UNAVAILABLE: (
        "I apologize, but I'm having trouble analyzing your data right now. "
        "Please try again later."
    ),
}

EMPTY_REPLY = (
    "I couldn't generate a response. "
    "Please try again with a more specific question."
)


def _status_of(error: BaseException) -> Optional[int]:
    """
    HTTP status carried by a provider exception.

    OpenAI errors expose `status_code`; google.api_core errors expose
    the status as an integer `code`.
    """
    for attr in ("status_code", "status", "code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return int(value)
    return None


def _is_quota_error(error: BaseException) -> bool:
    code = getattr(error, "code", None)
    if isinstance(code, str) and code == "insufficient_quota":
        return True
    return "quota" in str(error).lower()


def classify_failure(error: BaseException) -> InsightFailure:
    """Map a provider exception to the reply the user will see."""
    status = _status_of(error)
    if status == 429:
        if _is_quota_error(error):
            return InsightFailure.QUOTA_EXCEEDED
        return InsightFailure.RATE_LIMITED
    if status in (401, 403):
        return InsightFailure.AUTHENTICATION
    return InsightFailure.UNAVAILABLE


class InsightAgent:
    """
    AI agent answering the owner's questions about their shop.

    FLOW:
    1. ShopContext (already built from storage) → templated prompt
    2. Prompt + question → one chat completion
    3. Completion text → reply, or a canned reply on any failure
    """

    def __init__(
        self,
        client: Optional[CompletionClient] = None,
        llm_settings: Optional[LLMSettings] = None,
        app_settings: Optional[AppSettings] = None,
    ):
        self._client = client
        self._settings = llm_settings or get_settings().llm
        self._app_settings = app_settings or get_settings().app

    def _get_client(self) -> CompletionClient:
        # Created lazily so the app starts without an API key
        if self._client is None:
            self._client = create_completion_client(self._settings)
        return self._client

    def build_prompt(self, question: str, context: ShopContext) -> str:
        """Render the shop context and the question into one prompt."""
        symbol = self._app_settings.currency_symbol
        stats = context.total_stats

        if context.top_products:
            products = "\n".join(
                f"- {p.name}: {p.quantity} units, "
                f"{format_amount(p.revenue, symbol)} revenue"
                for p in context.top_products
            )
        else:
            products = "No product data available yet"

        if context.expense_summary:
            expenses = "\n".join(
                f"- {e.category}: {format_amount(e.total, symbol)}"
                for e in context.expense_summary
            )
        else:
            expenses = "No categorized expense data available yet"

        recent_rows = context.recent_transactions[:self._app_settings.prompt_recent_limit]
        if recent_rows:
            recent = "\n".join(
                f"- {t.type.value.upper()}: {format_amount(t.amount, symbol)} "
                f"({t.category}) - {t.description or 'No description'} "
                f"({t.timestamp.strftime('%b %d, %Y')})"
                for t in recent_rows
            )
        else:
            recent = "No transactions recorded yet"

        return f"""Based on the following business data, provide insightful and helpful advice responding to the owner's question.

SHOP FINANCIAL SUMMARY:
- Total Profit: {format_amount(stats.total_profit, symbol)}
- Total Expenses: {format_amount(stats.total_expense, symbol)}
- Net Balance: {format_amount(stats.net_balance, symbol)}
- Total Transactions: {stats.transaction_count}

TOP SELLING PRODUCTS:
{products}

TOP EXPENSE CATEGORIES:
{expenses}

RECENT TRANSACTIONS (LAST {len(recent_rows)}):
{recent}

SHOP OWNER'S QUESTION: "{question}"

Please provide a helpful, concise response with actionable advice based on the data.
If you cannot answer from the data provided, say so and suggest what data would help."""

    async def get_insight(
        self,
        user_id: int,
        question: str,
        context: ShopContext,
    ) -> str:
        """
        Answer a question about the user's shop.

        Never raises: provider failures are logged and replaced by
        one of FAILURE_REPLIES.
        """
        prompt = self.build_prompt(question, context)

        try:
            reply = await asyncio.wait_for(
                self._get_client().complete(SYSTEM_INSTRUCTION, prompt),
                timeout=self._settings.timeout_seconds,
            )
        except Exception as e:
            failure = classify_failure(e)
            logger.warning(
                "insight_failed",
                user_id=user_id,
                provider=self._settings.provider,
                failure=failure.value,
                status=_status_of(e),
                error_type=type(e).__name__,
                error=str(e),
            )
            return FAILURE_REPLIES[failure]

        logger.info(
            "insight_generated",
            user_id=user_id,
            provider=self._settings.provider,
            empty=not reply,
        )
        return reply or EMPTY_REPLY
