"""CLI Main Entry Point"""

import os
import sys
import time
from dataclasses import dataclass

from changelog_gen import MODEL_NAMES
from changelog_gen.config import load_config
from changelog_gen.git import GitLog, GitError
from changelog_gen.llm import (
    OpenAIClient, LLMError, StreamError,
    count_prompt_tokens, check_budget, estimate_cost,
)
from changelog_gen.output import bold, dim, info, warning, print_error, Spinner
from changelog_gen.output.render import ChangelogRenderer
from changelog_gen.prompts import PromptBuilder, PromptConfig

from changelog_gen.cli.args import parse_args
from changelog_gen.cli.commands import display_config, run_install_completion


@dataclass
class Settings:
    """Effective request settings after applying precedence."""
    model: str
    temperature: float
    frequency_penalty: float
    short: bool


def _handle_subcommands(args):
    """Handle subcommands that exit early.

    Returns:
        tuple: (exit_code, should_exit) - exit_code if should_exit is True
    """
    if args.install_completion:
        return run_install_completion(), True
    if args.display_config:
        return display_config(), True
    return 0, False


def _resolve_settings(args, config) -> Settings:
    """Resolve settings from args, env, or config.

    Precedence: CLI args > environment variables > config file
    """
    env_model = os.environ.get('CLOG_MODEL')
    if env_model and env_model not in MODEL_NAMES:
        print(warning(f"Ignoring CLOG_MODEL='{env_model}': unknown model"), file=sys.stderr)
        env_model = None
    return Settings(
        model=args.model or env_model or config.model,
        temperature=args.temperature if args.temperature is not None else config.temperature,
        frequency_penalty=args.frequency_penalty if args.frequency_penalty is not None else config.frequency_penalty,
        short=args.short or config.short,
    )


def _collect_log(rev_range, short, timings):
    """Run git log for the range.

    Returns:
        CommitLog or None if git failed or the range is empty
    """
    t0 = time.time()
    try:
        log = GitLog().get_log(rev_range, short=short)
    except GitError as e:
        print_error(str(e))
        return None
    finally:
        timings['git'] = time.time() - t0

    if log.is_empty:
        print_error(f"No commits found in {log.description}.")
        return None
    return log


def _stream_to_terminal(deltas, model, prompt_tokens, timings) -> str:
    """Spinner until the first chunk, then redraw the changelog in place."""
    t0 = time.time()
    spinner = Spinner(dim('Waiting for response...')).start()
    renderer = ChangelogRenderer(model, prompt_tokens, spinner=spinner)
    try:
        return renderer.consume(deltas)
    finally:
        timings['generate'] = time.time() - t0
        timings['response_tokens'] = renderer.response_tokens


def _stream_to_pipe(deltas, timings) -> str:
    """No cursor control when piped: collect everything, print once."""
    t0 = time.time()
    parts = [delta for delta in deltas if delta is not None]
    text = ''.join(parts)
    timings['generate'] = time.time() - t0
    timings['response_tokens'] = len(parts)
    print(text)
    return text


def _print_verbose_stats(args, is_pipe, settings, prompt_tokens, timings):
    """Print verbose timing and token statistics."""
    if not args.verbose or is_pipe:
        return
    response_tokens = timings.get('response_tokens', 0)
    cost = estimate_cost(prompt_tokens, response_tokens, settings.model)
    print()
    print(dim(f"  Prompt: {prompt_tokens} tokens"))
    print(dim(f"  Response: {response_tokens} tokens"))
    print(dim(f"  Cost: ${cost:.4f}"))
    if response_tokens > 0 and timings.get('generate'):
        tok_per_sec = response_tokens / timings['generate']
        print(dim(f"  Speed: {tok_per_sec:.1f} tokens/sec"))
    print(dim(f"  Timings: git={timings.get('git', 0):.2f}s, tokens={timings.get('tokens', 0):.2f}s, generate={timings.get('generate', 0):.2f}s"))


def _generate_changelog_flow(args, settings: Settings) -> int:
    """Main changelog generation flow.

    Returns:
        int: Exit code
    """
    is_pipe = not sys.stdout.isatty()
    timings = {}

    # Credential first: no git or network work without it
    try:
        client = OpenAIClient(model=settings.model)
    except LLMError as e:
        print_error(str(e))
        return 1

    log = _collect_log(args.range, settings.short, timings)
    if log is None:
        return 1

    messages = PromptBuilder().build(log, PromptConfig(short=settings.short, hint=args.hint))

    t0 = time.time()
    try:
        prompt_tokens = count_prompt_tokens(messages, settings.model)
        check_budget(prompt_tokens, settings.model)
    except LLMError as e:
        print_error(str(e))
        return 1
    finally:
        timings['tokens'] = time.time() - t0

    if not is_pipe:
        print(f"Summarizing {bold(str(log.commit_count))} commits ({log.description}) using {info(client.name)}...")

    try:
        deltas = client.stream(messages, settings.temperature, settings.frequency_penalty)
        if is_pipe:
            text = _stream_to_pipe(deltas, timings)
        else:
            text = _stream_to_terminal(deltas, settings.model, prompt_tokens, timings)
    except LLMError as e:
        if isinstance(e, StreamError) and not is_pipe:
            print()
        print_error(str(e))
        return 1

    if not text.strip() and not is_pipe:
        print(warning("The model returned an empty changelog."))

    _print_verbose_stats(args, is_pipe, settings, prompt_tokens, timings)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)

    # Handle subcommands that exit early
    exit_code, should_exit = _handle_subcommands(args)
    if should_exit:
        return exit_code

    config = load_config()
    settings = _resolve_settings(args, config)

    try:
        return _generate_changelog_flow(args, settings)
    except KeyboardInterrupt:
        print()
        print(dim("Cancelled."))
        return 130
