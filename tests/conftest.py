import pytest

from changelog_gen.output import strip_ansi as _strip_ansi


@pytest.fixture
def strip_ansi():
    """Return a function that removes ANSI escape codes."""
    return _strip_ansi
