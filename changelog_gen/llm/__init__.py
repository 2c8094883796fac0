"""LLM Client Package"""

from changelog_gen.llm.base import (
    LLMError,
    MissingAPIKeyError,
    BudgetExceededError,
    RequestError,
    StreamError,
    get_api_key,
)
from changelog_gen.llm.openai import OpenAIClient, iter_events, parse_delta, DONE_SENTINEL
from changelog_gen.llm.tokens import count_tokens, count_prompt_tokens, check_budget, estimate_cost

__all__ = [
    "LLMError",
    "MissingAPIKeyError",
    "BudgetExceededError",
    "RequestError",
    "StreamError",
    "get_api_key",
    "OpenAIClient",
    "iter_events",
    "parse_delta",
    "DONE_SENTINEL",
    "count_tokens",
    "count_prompt_tokens",
    "check_budget",
    "estimate_cost",
]
