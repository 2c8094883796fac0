"""LLM Errors and Shared Code"""

import os

OPENAI_API_KEY_ENV = "OPENAI_API_KEY"


class LLMError(Exception):
    """Raised when LLM operations fail."""
    pass


class MissingAPIKeyError(LLMError):
    """No API key in the environment."""

    def __init__(self, env_var: str = OPENAI_API_KEY_ENV):
        super().__init__(
            f"No API key found. Set {env_var} environment variable:\n"
            f"  export {env_var}='your-key-here'"
        )


class BudgetExceededError(LLMError):
    """Prompt is larger than the model's context window."""

    def __init__(self, prompt_tokens: int, max_tokens: int, model: str):
        self.prompt_tokens = prompt_tokens
        self.max_tokens = max_tokens
        super().__init__(
            f"Prompt is ~{prompt_tokens} tokens but {model} allows {max_tokens}. Try:\n"
            f"  - A smaller range: clog v1.2.0..HEAD\n"
            f"  - Subject lines only: clog --short\n"
            f"  - A larger model: clog -m gpt-4o-mini"
        )


class RequestError(LLMError):
    """Request body could not be encoded."""
    pass


class StreamError(LLMError):
    """Transport failure while opening or reading the response stream."""
    pass


def get_api_key(env_var: str = OPENAI_API_KEY_ENV) -> str:
    """Read the API key, failing before any network activity."""
    key = os.environ.get(env_var, "").strip()
    if not key:
        raise MissingAPIKeyError(env_var)
    return key
