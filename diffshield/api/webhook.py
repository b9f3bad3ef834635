"""
POST /webhook
=============
GitHub App webhook receiver.

Handled events (X-GitHub-Event):
    installation   — created / deleted update the installation count
    pull_request   — opened / synchronize run the review pipeline
    anything else  — acknowledged, not processed (marketplace_purchase
                     included; billing is out of scope)

Review Flow (pull_request):
    1. Skip when the event carries no installation
    2. Track the repository
    3. Load precomputed review inputs through the injected loader
       (doc-type classification, semantic diff, findings, code files)
    4. Run the strategy pipeline (rich review → legacy summary)
    5. Hand the report to the optional sink (e.g. a PR comment poster)
    6. Count the PR as reviewed and return the summary

The review pipeline never raises. Loader or sink failures are logged and
answered with HTTP 500 instead of crashing the server.
"""
import logging
from typing import Awaitable, Callable, Optional

from fastapi import APIRouter, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from diffshield.core.config import MiniMaxConfig, get_minimax_config
from diffshield.core.constants import REVIEWABLE_PR_ACTIONS
from diffshield.llm.strategies import ReviewPipeline, ReviewReport
from diffshield.models.events import (
    InstallationEvent,
    PullRequestEvent,
    parse_webhook_event,
)
from diffshield.models.review_inputs import ReviewInputs
from diffshield.services.stats_repository import UsageStatsRepository

logger = logging.getLogger(__name__)

# Returns None when the PR has nothing to review
ReviewInputsLoader = Callable[[PullRequestEvent], Awaitable[Optional[ReviewInputs]]]
ReviewReportSink = Callable[[PullRequestEvent, ReviewReport], Awaitable[None]]


def build_webhook_router(
    stats: UsageStatsRepository,
    pipeline: ReviewPipeline,
    inputs_loader: Optional[ReviewInputsLoader] = None,
    report_sink: Optional[ReviewReportSink] = None,
    config_provider: Callable[[], MiniMaxConfig] = get_minimax_config,
) -> APIRouter:
    router = APIRouter(tags=["Webhook"])

    def _handle_installation(event: InstallationEvent) -> dict:
        installation_id = str(event.installation.id)
        if event.action == "created":
            stats.add_installation(installation_id)
        elif event.action == "deleted":
            stats.remove_installation(installation_id)
        return {"ok": True, "action": event.action}

    async def _handle_pull_request(event: PullRequestEvent):
        if event.action not in REVIEWABLE_PR_ACTIONS:
            return {"ok": True, "action": event.action}

        if event.installation is None:
            logger.info("No installation, skipping...")
            return {"ok": True}

        repo_name = event.repository.full_name if event.repository else "unknown"
        if event.repository:
            stats.add_repository(event.repository.full_name)

        if inputs_loader is None:
            logger.warning(
                "No review inputs loader configured, skipping PR #%d in %s",
                event.pull_request.number, repo_name,
            )
            return {"ok": True, "action": event.action}

        logger.info("Processing PR #%d in %s", event.pull_request.number, repo_name)
        try:
            inputs = await inputs_loader(event)
            if inputs is None:
                logger.info("Nothing to review for PR #%d", event.pull_request.number)
                return {"ok": True, "action": event.action}

            # Credentials are read per request, never cached
            report = await pipeline.run(inputs, config_provider())
            if report_sink is not None:
                await report_sink(event, report)
        except Exception as e:
            logger.error("Error processing webhook: %s", e, exc_info=True)
            return JSONResponse(status_code=500, content={"error": "Failed to process"})

        stats.record_pull_request_reviewed()
        logger.info("Review complete (%s): %s", report.strategy or "none", report.summary)
        return {"ok": True, "result": report.summary, "strategy": report.strategy}

    @router.post("/webhook")
    async def webhook(
        request: Request,
        x_github_event: str = Header(default="", alias="X-GitHub-Event"),
    ):
        try:
            payload = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid JSON payload")
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Invalid JSON payload")

        logger.info("Received webhook: %s - %s", x_github_event, payload.get("action"))

        try:
            event = parse_webhook_event(x_github_event, payload)
        except ValidationError as e:
            logger.warning("Invalid %s payload: %s", x_github_event, e)
            raise HTTPException(status_code=400, detail="Invalid webhook payload")

        if isinstance(event, InstallationEvent):
            return _handle_installation(event)
        if isinstance(event, PullRequestEvent):
            return await _handle_pull_request(event)

        logger.info("Ignoring %s event", event.event)
        return {"ok": True, "event": event.event, "action": event.action}

    return router
