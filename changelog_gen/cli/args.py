"""CLI Argument Parsing"""

import argparse
import argcomplete

from changelog_gen import MODEL_NAMES, __version__
from changelog_gen.config import TEMPERATURE_RANGE, FREQUENCY_PENALTY_RANGE


def bounded_float(low: float, high: float):
    """argparse type accepting a float in [low, high]."""
    def _parse(value: str) -> float:
        try:
            number = float(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"'{value}' is not a number")
        if not low <= number <= high:
            raise argparse.ArgumentTypeError(f"{number} is outside {low}..{high}")
        return number
    return _parse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='clog',
        description='Generate a changelog from git commit messages',
        epilog='Example: clog v1.2.0..HEAD --short'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')

    # Input options
    parser.add_argument('range', nargs='?', default=None, metavar='RANGE', help='Rev range, e.g. v1.0..v1.1 or abc123..HEAD (default: entire history)')
    parser.add_argument('-s', '--short', action='store_true', help='Only use the first line of each commit message to reduce tokens')
    parser.add_argument('--hint', type=str, metavar='TEXT', help='Add context: --hint "first release with plugin support"')

    # LLM options
    parser.add_argument('-m', '--model', type=str, choices=MODEL_NAMES, help='Chat model')
    parser.add_argument('-t', '--temperature', type=bounded_float(*TEMPERATURE_RANGE), metavar='T', help='Sampling temperature (0-2)')
    parser.add_argument('-f', '--frequency-penalty', type=bounded_float(*FREQUENCY_PENALTY_RANGE), metavar='P', help='Frequency penalty (-2 to 2)')

    # Output options
    parser.add_argument('--verbose', action='store_true', help='Show debug info (tokens, cost, timings)')

    # Config
    parser.add_argument('--display-config', action='store_true', help='Show current configuration')
    parser.add_argument('--install-completion', action='store_true', help='Install shell tab completion')

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)
