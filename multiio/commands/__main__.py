import argparse
import logging
import sys

import requests

from .. import exceptions, VERSION
from ..http import readable_http_error
from ..utils import configure_logger, get_app_name, log_exception
from . import cat, size

multiio_commands = [
    cat,
    size,
]


# Root logger of multiio (not including third-party libraries)
LOG = logging.getLogger(get_app_name())


def _log_params(argvars: dict) -> None:
    MAX_ENTRIES = 5

    for k, v in argvars.items():
        if v is None:
            continue
        if callable(v):
            continue
        if isinstance(v, (list, set, tuple)):
            entries = [str(x) for x in v]
            if len(entries) <= MAX_ENTRIES:
                v = ", ".join(entries)
            else:
                v = (
                    ", ".join(entries[:MAX_ENTRIES])
                ) + f" and {len(entries) - MAX_ENTRIES} more"
        LOG.debug("CLI param: %s: %s", k, v)


def main(argv=None):
    version_text = f"multiio version {VERSION}"

    parser = argparse.ArgumentParser(
        "multiio",
    )
    parser.add_argument(
        "--version",
        help="show the version of multiio and exit",
        action="version",
        version=version_text,
    )
    parser.add_argument(
        "--verbose",
        help="show verbose",
        action="store_true",
        default=False,
        required=False,
    )
    parser.set_defaults(func=lambda _: parser.print_help())

    all_commands = [module.Command() for module in multiio_commands]

    subparsers = parser.add_subparsers(
        description="please choose one of the available subcommands",
    )
    for command in all_commands:
        cmd_parser = subparsers.add_parser(
            command.name, help=command.help, conflict_handler="resolve"
        )
        command.add_basic_arguments(cmd_parser)
        cmd_parser.set_defaults(func=command.run)

    args = parser.parse_args(argv)

    # Logs go to stderr so that `multiio cat` can write bytes to stdout
    configure_logger(
        LOG, level=logging.DEBUG if args.verbose else logging.INFO, stream=sys.stderr
    )

    LOG.debug("%s", version_text)
    argvars = vars(args)
    _log_params(argvars)

    try:
        args.func(argvars)
    except requests.HTTPError as ex:
        LOG.error(f"{ex.__class__.__name__}: {readable_http_error(ex)}")
        sys.exit(16)

    except requests.RequestException as ex:
        log_exception(LOG, ex)
        sys.exit(17)

    except exceptions.MultiIOError as ex:
        log_exception(LOG, ex)
        sys.exit(ex.exit_code)

    except KeyboardInterrupt:
        LOG.info("Interrupted by user...")
        sys.exit(130)


if __name__ == "__main__":
    main()
