"""setup-vlt - install the vlt package manager and cache it between runs.

    Actions:
        run: resolve the requested version, reuse/restore/install vlt, emit outputs
        post: save a fresh installation to the cache
        resolve: print the version a run would install

    Returns:
        int: Exit code
"""
import logging
import sys

from args import parse_args
from cli_config import load_inputs, setup_logging
from cli_main import run_setup
from cli_post import run_post
from common.command_runner import SubprocessCommandRunner
from common.logging_utils import configure_logging
from constants import Constants, ExitCodes
from registry import create_registry
from versioning.parser import is_latest
from versioning.resolver import fetch_latest_version, resolve_version

logger = logging.getLogger(__name__)


def run_resolve(inputs, stream=None):
    """Print the concrete version a run would install.

    ``latest`` is looked up through the registry's dist-tag here, since the
    installer is not involved.
    """
    registry = create_registry(
        inputs.resolver,
        registry_url=inputs.registry_url,
        runner=SubprocessCommandRunner(),
    )
    resolved = resolve_version(inputs.vlt_version, inputs.vlt_version_file, registry=registry)
    if is_latest(resolved):
        resolved = fetch_latest_version(registry=registry)
    print(resolved, file=stream or sys.stdout)
    return ExitCodes.SUCCESS.value


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(getattr(args, "LOG_LEVEL", None))
    inputs = load_inputs(args)
    setup_logging(args, inputs.log_level)
    logger.debug("Inputs: %s", inputs)

    if args.action == "run":
        return run_setup(inputs)
    if args.action == "post":
        return run_post(inputs)
    if args.action == "resolve":
        return run_resolve(inputs)
    logger.error("Unsupported action for %s: %s", Constants.TOOL_NAME, args.action)
    return ExitCodes.USAGE_ERROR.value


if __name__ == "__main__":
    sys.exit(main())
