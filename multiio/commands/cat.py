import argparse
import inspect
from pathlib import Path

from .. import constants
from ..catenate import cat


def _non_negative_int(value: str) -> int:
    try:
        parsed = constants._parse_filesize(value)
    except ValueError as ex:
        raise argparse.ArgumentTypeError(str(ex))
    if parsed is None or parsed < 0:
        raise argparse.ArgumentTypeError(f"expect a non-negative size, got {value}")
    return parsed


class Command:
    name = "cat"
    help = "read the concatenation of the sources, or a byte range of it"

    def add_basic_arguments(self, parser: argparse.ArgumentParser):
        parser.add_argument(
            "sources",
            help="Paths or http(s) URLs of the sources, in concatenation order.",
            nargs="+",
        )
        parser.add_argument(
            "--offset",
            help="Start reading at this offset of the concatenation. Accepts B, K, M, G suffixes. [default: %(default)s]",
            type=_non_negative_int,
            default=0,
            required=False,
        )
        parser.add_argument(
            "--length",
            help="Read at most this many bytes. Accepts B, K, M, G suffixes. [default: read to the end]",
            type=_non_negative_int,
            default=None,
            required=False,
        )
        parser.add_argument(
            "--output",
            help='Path to write the bytes to. If it is "-", then write to STDOUT. [default: -]',
            type=Path,
            default=None,
            required=False,
        )

    def run(self, vars_args: dict):
        cat(
            **(
                {
                    k: v
                    for k, v in vars_args.items()
                    if k in inspect.getfullargspec(cat).args
                }
            )
        )
