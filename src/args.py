"""Argument parsing functionality for setup-vlt."""

import argparse

from constants import Constants


def _add_common_options(parser):
    """Options shared by every action."""
    parser.add_argument("--vlt-version",
                        dest="VLT_VERSION",
                        help="Version, semver range or dist-tag of vlt to install (default: latest)",
                        action="store",
                        type=str)
    parser.add_argument("--vlt-version-file",
                        dest="VLT_VERSION_FILE",
                        help="Read the version from a .vlt-version file or package.json",
                        action="store",
                        type=str)
    parser.add_argument("--registry-url",
                        dest="REGISTRY_URL",
                        help="Custom npm registry URL",
                        action="store",
                        type=str)
    parser.add_argument("--no-cache",
                        dest="NO_CACHE",
                        help="Disable restoring and saving the vlt installation cache",
                        action="store_const",
                        const=True,
                        default=None)
    parser.add_argument("--cache-dir",
                        dest="CACHE_DIR",
                        help=f"Cache directory (default: {Constants.CACHE_DIR})",
                        action="store",
                        type=str)
    parser.add_argument("--state-file",
                        dest="STATE_FILE",
                        help="File carrying state from the run phase to the post phase",
                        action="store",
                        type=str)
    parser.add_argument("--resolver",
                        dest="RESOLVER",
                        help="Registry backend used to resolve version ranges (default: npm)",
                        action="store",
                        type=str.lower,
                        choices=Constants.SUPPORTED_RESOLVERS)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML or YML)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)


def build_parser():
    """Build the top-level parser with run/post/resolve actions."""
    parser = argparse.ArgumentParser(
        prog="setup-vlt",
        description="Install the vlt package manager and cache it between runs",
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="action", metavar="action")
    subparsers.required = True

    run_parser = subparsers.add_parser(
        "run", help="Resolve, restore or install vlt and add it to PATH")
    _add_common_options(run_parser)

    post_parser = subparsers.add_parser(
        "post", help="Save a fresh vlt installation to the cache")
    _add_common_options(post_parser)

    resolve_parser = subparsers.add_parser(
        "resolve", help="Print the version a run would install")
    _add_common_options(resolve_parser)

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
