"""Terminal row counting for wrapped text."""

import regex

# Extended grapheme clusters (UAX #29)
GRAPHEME_RE = regex.compile(r'\X')

ZERO_WIDTH = ('\r', '\ufeff')


def iter_clusters(text: str):
    """Yield the drawable and newline clusters of text, skipping zero-width ones.

    CR and BOM are removed before segmentation so they can't split a cluster
    they happen to sit inside.
    """
    for ch in ZERO_WIDTH:
        text = text.replace(ch, '')
    for match in GRAPHEME_RE.finditer(text):
        yield match.group()


def count_rows(text: str, width: int) -> int:
    """Number of terminal rows text occupies when wrapped at width columns.

    Every non-newline cluster is one column. Overflowing the width moves the
    overflowing cluster onto a new row. Non-empty text always has its final,
    still-open row counted, so "\\n" is two rows and "" is zero.
    """
    if width < 1:
        raise ValueError(f"width must be positive, got {width}")
    if not text:
        return 0

    rows = 0
    column = 0
    for cluster in iter_clusters(text):
        if cluster == '\n':
            rows += 1
            column = 0
            continue
        column += 1
        if column > width:
            rows += 1
            column = 1
    return rows + 1
