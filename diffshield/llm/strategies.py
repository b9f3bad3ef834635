"""
Review Strategies
=================
Ordered list of independent review strategies and the pipeline that runs
them.

Routing Strategy:
    1. Rich review (structured JSON, llm/review_parser.py)
    2. Legacy summary (one plain-text sentence, no schema)
    3. Stop at the first VALID result

Independence:
    - Each strategy makes at most one model call of its own.
    - The legacy strategy is a separate attempt, never a retry of the
      rich one; it is only reached when the rich strategy did not end VALID.
    - Strategies hold no state between calls, so one pipeline instance can
      serve concurrent webhook requests.

Adding a provider means appending another ReviewStrategy to the list.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from diffshield.core.config import MiniMaxConfig
from diffshield.llm.client import MiniMaxClient
from diffshield.models.review_inputs import ReviewInputs
from diffshield.models.review_output import V2ReviewOutput
from diffshield.services.pr_description import generate_v2_pr_description
from diffshield.services.review_synthesizer import SynthesisOutcome, synthesize_v2_review
from diffshield.services.summarizer import generate_ai_summary
from diffshield.utils.failure_reasons import EMPTY_RESPONSE, MISSING_CREDENTIALS, get_error_kind

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------
@dataclass
class StrategyResult:
    """Outcome of one strategy attempt."""
    strategy: str
    outcome: str
    review: Optional[V2ReviewOutput] = None
    summary: str = ""
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome == SynthesisOutcome.VALID


@dataclass
class ReviewReport:
    """Final result of a pipeline run."""
    strategy: str = ""
    review: Optional[V2ReviewOutput] = None
    summary: str = ""
    pr_description: str = ""
    attempts: List[StrategyResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.strategy)


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------
class ReviewStrategy:
    """Base class for one way of producing a review."""

    name = "base"

    def __init__(self, client: Optional[MiniMaxClient] = None) -> None:
        self.client = client

    async def run(self, inputs: ReviewInputs, config: MiniMaxConfig) -> StrategyResult:
        raise NotImplementedError


class RichReviewStrategy(ReviewStrategy):
    """Structured JSON review with verdict, risks and checklist."""

    name = "rich"

    async def run(self, inputs: ReviewInputs, config: MiniMaxConfig) -> StrategyResult:
        result = await synthesize_v2_review(
            inputs.pr_context,
            inputs.doc_type,
            inputs.semantic_diff,
            inputs.findings,
            config,
            code_files=inputs.code_files,
            client=self.client,
        )
        if not result.ok:
            return StrategyResult(self.name, result.outcome, reason=result.reason)

        review = result.output
        summary = review.verdict.summary or str(review.pr_intent)
        return StrategyResult(self.name, SynthesisOutcome.VALID, review=review, summary=summary)


class LegacySummaryStrategy(ReviewStrategy):
    """Single plain-text summary, no schema."""

    name = "legacy"

    def __init__(self, client: Optional[MiniMaxClient] = None, variant: Optional[str] = None) -> None:
        super().__init__(client)
        self.variant = variant

    async def run(self, inputs: ReviewInputs, config: MiniMaxConfig) -> StrategyResult:
        if not config.is_complete:
            return StrategyResult(
                self.name, SynthesisOutcome.UNAVAILABLE, reason=MISSING_CREDENTIALS
            )

        summary = await generate_ai_summary(
            inputs.doc_type,
            inputs.semantic_diff,
            inputs.findings,
            config,
            code_files=inputs.code_files,
            variant=self.variant,
            client=self.client,
        )
        if not summary:
            return StrategyResult(self.name, SynthesisOutcome.UNAVAILABLE, reason=EMPTY_RESPONSE)
        return StrategyResult(self.name, SynthesisOutcome.VALID, summary=summary)


def default_strategies(client: Optional[MiniMaxClient] = None) -> List[ReviewStrategy]:
    return [RichReviewStrategy(client), LegacySummaryStrategy(client)]


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------
class ReviewPipeline:
    """
    Runs review strategies in order until one succeeds.

    Usage:
        pipeline = ReviewPipeline()
        report = await pipeline.run(inputs, get_minimax_config())
    """

    def __init__(self, strategies: Optional[Sequence[ReviewStrategy]] = None) -> None:
        self.strategies: List[ReviewStrategy] = list(
            strategies if strategies is not None else default_strategies()
        )

    async def run(self, inputs: ReviewInputs, config: MiniMaxConfig) -> ReviewReport:
        """
        Try each strategy once, in order.

        Returns
        -------
        ReviewReport
            strategy is "" and summary is "" when every strategy failed.
        """
        report = ReviewReport()
        for strategy in self.strategies:
            result = await strategy.run(inputs, config)
            report.attempts.append(result)

            if result.ok:
                report.strategy = result.strategy
                report.review = result.review
                report.summary = result.summary
                if result.review is not None:
                    report.pr_description = generate_v2_pr_description(result.review)
                logger.info("Review produced by %s strategy", result.strategy)
                return report

            logger.info(
                "Strategy %s ended %s (%s, %s error), trying next",
                result.strategy, result.outcome, result.reason,
                get_error_kind(result.reason),
            )

        logger.warning("All review strategies failed, no summary available")
        return report
