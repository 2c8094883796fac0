"""Prompt Builder - Construct chat messages for changelog generation."""

from dataclasses import dataclass

from changelog_gen.git import CommitLog

# Keep-a-changelog headings, in the order they should appear
CHANGELOG_SECTIONS = {
    'Added': 'new features and capabilities',
    'Changed': 'changes in existing behavior',
    'Deprecated': 'soon-to-be removed features',
    'Removed': 'features removed in this range',
    'Fixed': 'bug fixes',
    'Security': 'vulnerability fixes',
}


@dataclass
class PromptConfig:
    """User-provided context that shapes the prompt."""
    short: bool = False
    hint: str | None = None


class PromptBuilder:
    """Builds the system + user messages for one chat-completion request.

    The user turn is always exactly the captured log; everything else goes
    into the system instruction.
    """

    def build(self, log: CommitLog, config: PromptConfig | None = None) -> list[dict]:
        config = config or PromptConfig(short=log.short)
        return [
            {"role": "system", "content": self.build_system_prompt(config)},
            {"role": "user", "content": log.text},
        ]

    def build_system_prompt(self, config: PromptConfig) -> str:
        sections = [
            self._build_role_section(),
            self._build_format_section(),
            self._build_input_section(config),
            self._build_hints_section(config),
            self._build_final_instructions(),
        ]
        return "\n\n".join(filter(None, sections))

    def _build_role_section(self) -> str:
        return """You are a release manager writing the changelog for a software project. Your changelogs are read by users deciding whether to upgrade.

Core principles:
- Group related commits into a single entry instead of listing every commit.
- Describe the effect on users, not the implementation.
- Skip commits with no user-visible effect (merges, formatting, CI tweaks)."""

    def _build_format_section(self) -> str:
        headings = "\n".join(f"  - {name}: {desc}" for name, desc in CHANGELOG_SECTIONS.items())
        return f"""<format>
Write Markdown. Use a level-3 heading per category, in this order, and omit empty categories:
{headings}

Each entry is a single "- " bullet, one line, imperative mood.
</format>"""

    def _build_input_section(self, config: PromptConfig) -> str:
        detail = "the subject line" if config.short else "the full message"
        note = "\nOnly subject lines are available, so do not invent details." if config.short else ""
        return f"""<input>
The user message is `git log` output: one commit per entry, the commit hash followed by {detail}.{note}
</input>"""

    def _build_hints_section(self, config: PromptConfig) -> str:
        if not config.hint:
            return ""

        return f"""<context>
The maintainer provided this context about the release:
"{config.hint}"

Use this to inform the changelog, but verify it matches the commits.
</context>"""

    def _build_final_instructions(self) -> str:
        return """<instructions>
- Start directly with the first heading
- No preamble like "Here's the changelog:"
- No explanation after the changelog
- Do not include commit hashes
</instructions>"""
