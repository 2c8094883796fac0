"""Git Operations Package"""

from changelog_gen.git.log import GitLog, GitError, CommitLog

__all__ = [
    "GitLog",
    "GitError",
    "CommitLog",
]
