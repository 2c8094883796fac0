"""Prompt Construction Package"""

from changelog_gen.prompts.builder import PromptBuilder, PromptConfig, CHANGELOG_SECTIONS

__all__ = [
    "PromptBuilder",
    "PromptConfig",
    "CHANGELOG_SECTIONS",
]
