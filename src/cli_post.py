"""Post phase: save a fresh vlt installation to the cache.

Runs after the user's job steps, so nothing here may fail the workflow:
every error is downgraded to a warning and the exit code is always success.
"""

from __future__ import annotations

import logging
from typing import Optional

from cli_config import SetupInputs
from constants import Constants, ExitCodes
from handoff import HandoffStore, read_handoff
from orchestrator import SetupOrchestrator

logger = logging.getLogger(__name__)


def run_post(
    inputs: SetupInputs,
    *,
    orchestrator: Optional[SetupOrchestrator] = None,
    store: Optional[HandoffStore] = None,
) -> int:
    """Entry point for the post action."""
    try:
        store = store or HandoffStore(inputs.state_file)
        state = read_handoff(store)
        if not state.vlt_version:
            logger.info("No %s version state found, skipping cache save", Constants.TOOL_NAME)
            return ExitCodes.SUCCESS.value

        logger.info("Post-action: saving %s %s to cache...", Constants.TOOL_NAME, state.vlt_version)
        if orchestrator is None:
            from cli_main import build_orchestrator  # pylint: disable=import-outside-toplevel
            orchestrator = build_orchestrator(inputs)
        orchestrator.save_cache_if_needed(state.vlt_version, state.cache_hit, state.no_cache)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.warning("Cache save failed: %s", exc)
    return ExitCodes.SUCCESS.value
