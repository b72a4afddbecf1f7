import argparse
import inspect

from ..catenate import show_sizes


class Command:
    name = "size"
    help = "show where each source starts in the concatenation and the total size"

    def add_basic_arguments(self, parser: argparse.ArgumentParser):
        parser.add_argument(
            "sources",
            help="Paths or http(s) URLs of the sources, in concatenation order.",
            nargs="+",
        )

    def run(self, vars_args: dict):
        show_sizes(
            **(
                {
                    k: v
                    for k, v in vars_args.items()
                    if k in inspect.getfullargspec(show_sizes).args
                }
            )
        )
