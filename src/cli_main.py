"""Run phase: resolve, ensure vlt is installed, emit outputs and handoff state."""

from __future__ import annotations

import logging
from typing import Optional

from cache import CacheGateway, LocalArchiveCache
from cli_config import SetupInputs
from common.command_runner import CommandRunner, SubprocessCommandRunner
from common.logging_utils import safe_url
from common.workflow import set_failed, set_output
from constants import Constants, ExitCodes, OutputKeys
from errors import SetupVltError
from handoff import HandoffStore, clear_handoff, write_handoff
from orchestrator import SetupOrchestrator
from registry import create_registry
from versioning.models import HandoffState, SetupResult

logger = logging.getLogger(__name__)


def build_orchestrator(
    inputs: SetupInputs, runner: Optional[CommandRunner] = None
) -> SetupOrchestrator:
    """Wire the production collaborators for ``inputs``."""
    runner = runner or SubprocessCommandRunner()
    return SetupOrchestrator(
        runner=runner,
        registry=create_registry(inputs.resolver, registry_url=inputs.registry_url, runner=runner),
        cache=CacheGateway(LocalArchiveCache(inputs.cache_dir)),
        registry_url=inputs.registry_url,
        no_cache=inputs.no_cache,
    )


def _log_inputs(inputs: SetupInputs) -> None:
    logger.info("Setting up %s...", Constants.TOOL_NAME)
    logger.info("Version: %s", inputs.vlt_version)
    if inputs.vlt_version_file:
        logger.info("Version file: %s", inputs.vlt_version_file)
    if inputs.registry_url:
        logger.info("Registry URL: %s", safe_url(inputs.registry_url))
    if inputs.no_cache:
        logger.info("Caching disabled")


def emit_result(result: SetupResult, inputs: SetupInputs, store: HandoffStore) -> None:
    """Publish outputs and persist the state the post phase needs."""
    set_output(OutputKeys.VLT_VERSION.value, result.installed_version)
    set_output(OutputKeys.VLT_PATH.value, result.installed_path)
    set_output(OutputKeys.CACHE_HIT.value, str(result.cache_hit).lower())

    write_handoff(
        store,
        HandoffState(
            vlt_version=result.resolved_version,
            cache_hit=result.cache_hit,
            no_cache=inputs.no_cache,
        ),
    )


def run_setup(
    inputs: SetupInputs,
    *,
    orchestrator: Optional[SetupOrchestrator] = None,
    store: Optional[HandoffStore] = None,
) -> int:
    """Entry point for the run action. Returns the process exit code."""
    _log_inputs(inputs)
    orchestrator = orchestrator or build_orchestrator(inputs)
    store = store or HandoffStore(inputs.state_file)

    try:
        clear_handoff(store)
    except OSError as exc:
        logger.warning("Could not reset state file %s: %s", store.path, exc)

    try:
        result = orchestrator.setup(inputs.vlt_version, inputs.vlt_version_file)
    except SetupVltError as exc:
        set_failed(f"Action failed: {exc}")
        return ExitCodes.SETUP_FAILED.value

    try:
        emit_result(result, inputs, store)
    except OSError as exc:
        set_failed(f"Action failed: could not write run outputs: {exc}")
        return ExitCodes.SETUP_FAILED.value

    logger.info("Successfully setup %s %s", Constants.TOOL_NAME, result.installed_version)
    logger.info("%s path: %s", Constants.TOOL_NAME, result.installed_path)
    logger.info("Cache hit: %s", str(result.cache_hit).lower())
    return ExitCodes.SUCCESS.value
