"""Token counting and cost estimates via tiktoken."""

import tiktoken

from changelog_gen import MODELS, DEFAULT_MODEL
from changelog_gen.llm.base import BudgetExceededError

FALLBACK_ENCODING = "cl100k_base"

# Chat format overhead: every message is wrapped in role/separator tokens,
# and the reply is primed with the assistant role.
TOKENS_PER_MESSAGE = 3
TOKENS_REPLY_PRIMING = 3


def get_encoding(model: str):
    try:
        return tiktoken.encoding_for_model(model)
    except KeyError:
        return tiktoken.get_encoding(FALLBACK_ENCODING)


def count_tokens(text: str, model: str = DEFAULT_MODEL) -> int:
    """Number of tokens text encodes to for model."""
    if not text:
        return 0
    return len(get_encoding(model).encode(text, disallowed_special=()))


def count_prompt_tokens(messages: list[dict], model: str = DEFAULT_MODEL) -> int:
    """Estimate prompt tokens for a chat request, including message framing."""
    encoding = get_encoding(model)
    total = TOKENS_REPLY_PRIMING
    for message in messages:
        total += TOKENS_PER_MESSAGE
        for value in message.values():
            total += len(encoding.encode(value, disallowed_special=()))
    return total


def check_budget(prompt_tokens: int, model: str = DEFAULT_MODEL) -> None:
    """Raise BudgetExceededError if the prompt can't fit the model's context."""
    max_tokens = MODELS[model].max_tokens
    if prompt_tokens > max_tokens:
        raise BudgetExceededError(prompt_tokens, max_tokens, model)


def estimate_cost(prompt_tokens: int, response_tokens: int, model: str = DEFAULT_MODEL) -> float:
    """USD cost of a request, from the per-1K prices in MODELS."""
    info = MODELS[model]
    return (prompt_tokens * info.prompt_cost + response_tokens * info.completion_cost) / 1000
