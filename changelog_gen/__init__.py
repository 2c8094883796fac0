"""
Changelog Generator

AI-powered changelogs from a range of git commit messages.
"""

from dataclasses import dataclass

__version__ = "1.0.0"


@dataclass(frozen=True)
class ModelInfo:
    """Context size and USD price per 1K tokens for a chat model."""
    max_tokens: int
    prompt_cost: float
    completion_cost: float


# Centralized model table - single source of truth
# Used by: llm/tokens.py (budget, cost), config (validation), cli/args.py (argparse)
MODELS = {
    'gpt-3.5-turbo': ModelInfo(max_tokens=4096, prompt_cost=0.0015, completion_cost=0.002),
    'gpt-3.5-turbo-16k': ModelInfo(max_tokens=16384, prompt_cost=0.003, completion_cost=0.004),
    'gpt-4': ModelInfo(max_tokens=8192, prompt_cost=0.03, completion_cost=0.06),
    'gpt-4-32k': ModelInfo(max_tokens=32768, prompt_cost=0.06, completion_cost=0.12),
    'gpt-4o-mini': ModelInfo(max_tokens=128000, prompt_cost=0.00015, completion_cost=0.0006),
    'gpt-4o': ModelInfo(max_tokens=128000, prompt_cost=0.0025, completion_cost=0.01),
}

DEFAULT_MODEL = 'gpt-3.5-turbo'

# List of model ids for validation and argparse
MODEL_NAMES = list(MODELS.keys())
