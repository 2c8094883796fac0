"""Git Log - Extract commit messages for a rev range."""

import subprocess
from dataclasses import dataclass

# Each entry leads with the full hash so the model can reference commits
FULL_FORMAT = '%H %B'
SHORT_FORMAT = '%H %s'


@dataclass
class CommitLog:
    """Captured `git log` output for one rev range."""
    text: str
    commit_count: int = 0
    rev_range: str | None = None
    short: bool = False

    @property
    def is_empty(self) -> bool:
        return self.commit_count == 0 or not self.text.strip()

    @property
    def description(self) -> str:
        """Human-readable range, e.g. 'v1.0..HEAD' or 'entire history'."""
        return self.rev_range or 'entire history'


class GitError(Exception):
    """Raised when git operations fail."""
    pass


class GitLog:
    """Reads commit messages from git."""

    def __init__(self):
        self._verify_git_available()
        self._verify_in_repo()

    def _run_git(self, *args: str) -> str:
        """Run a git command and return stdout decoded as strict UTF-8."""
        try:
            result = subprocess.run(
                ['git', *args],
                capture_output=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b'').decode('utf-8', errors='replace').strip()
            raise GitError(f"Git command failed: git {' '.join(args)}\n{stderr}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

        try:
            return result.stdout.decode('utf-8')
        except UnicodeDecodeError as e:
            raise GitError(f"Output of git {args[0]} is not valid UTF-8: {e}")

    def _verify_git_available(self) -> None:
        """Fail fast if git isn't available."""
        try:
            self._run_git('--version')
        except GitError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_in_repo(self) -> None:
        """Fail fast if we're not in a git repository."""
        try:
            self._run_git('rev-parse', '--git-dir')
        except GitError:
            raise GitError("Not inside a git repository")

    def get_log(self, rev_range: str | None = None, short: bool = False) -> CommitLog:
        """Get commit messages for rev_range (whole history when None).

        In short mode only the subject line of each message is kept.
        """
        if rev_range and rev_range.startswith('-'):
            raise GitError(f"Invalid rev range '{rev_range}': ranges can't start with '-'")

        fmt = SHORT_FORMAT if short else FULL_FORMAT
        args = ['log', f'--format={fmt}']
        if rev_range:
            args.append(rev_range)

        text = self._run_git(*args)
        return CommitLog(
            text=text,
            commit_count=self._count_commits(rev_range),
            rev_range=rev_range,
            short=short,
        )

    def _count_commits(self, rev_range: str | None) -> int:
        """Count commits with rev-list so multi-line bodies don't skew the number."""
        output = self._run_git('rev-list', '--count', rev_range or 'HEAD')
        try:
            return int(output.strip())
        except ValueError:
            return 0
