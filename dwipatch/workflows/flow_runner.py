from argparse import ArgumentParser
import logging

from dwipatch import __version__ as dwipatch_version
from dwipatch.utils.logging import configure_logger

COMMON_ARGS = ("force", "log_level", "log_file")


def get_level(lvl):
    """Transforms the logging level passed on the commandline into a proper
    logging level.
    """
    level = logging.getLevelName(str(lvl).upper())
    return level if isinstance(level, int) else logging.INFO


def build_parser(flow):
    """Build the command line parser of `flow`, with the arguments common to
    all workflows."""
    parser = ArgumentParser(description=(flow.run.__doc__ or "").split("\n")[0])
    flow.add_arguments(parser)

    parser.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Force overwriting output files.",
    )
    parser.add_argument(
        "--version", action="version", version=f"dwipatch {dwipatch_version}"
    )
    parser.add_argument(
        "--log_level",
        default="INFO",
        metavar="string",
        help="Log messages display level. Accepted options include CRITICAL, "
        "ERROR, WARNING, INFO, DEBUG and NOTSET (default INFO).",
    )
    parser.add_argument(
        "--log_file", default="", metavar="string", help="Log file to be saved."
    )
    return parser


def run_flow(flow, argv=None):
    """Wraps the process of building an argparser that reflects the workflow
    that we want to run along with some generic parameters like logging and
    force. The resulting parameters are then fed to the workflow's run
    method.
    """
    args = vars(build_parser(flow).parse_args(argv))

    configure_logger(level=get_level(args["log_level"]), filename=args["log_file"])
    flow._force_overwrite = args["force"]

    for key in COMMON_ARGS:
        del args[key]

    return flow.run(**args)
