"""
Review Synthesizer
==================
Produces the rich, structured review for a pull request with one model call.

Flow:
    1. Check credentials → UNAVAILABLE without touching the network
    2. Compose the rich prompt (llm/prompts.py)
    3. One MiniMax request (temperature 0.3, max_tokens 2000)
    4. Non-2xx / transport error → UNAVAILABLE
    5. Parse and validate the response (llm/review_parser.py)
    6. VALID with a V2ReviewOutput, or INVALID

Outcomes:
    VALID        — structured output returned
    UNAVAILABLE  — missing credentials, transport failure, non-2xx status
    INVALID      — no JSON, undecodable JSON, or schema gate failed

Callers treat UNAVAILABLE and INVALID the same unless they explicitly run
the legacy summarizer as a separate attempt (see llm/strategies.py).
Nothing here raises.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from diffshield.core.config import MiniMaxConfig
from diffshield.core.constants import RICH_MAX_TOKENS, REVIEW_TEMPERATURE
from diffshield.llm.client import MiniMaxClient
from diffshield.llm.prompts import build_rich_prompt
from diffshield.llm.review_parser import parse_v2_response_detailed
from diffshield.models.analysis import DocTypeClassification, ReviewFinding, SemanticDiff
from diffshield.models.pr_context import CodeFileInfo, PRContext
from diffshield.models.review_output import V2ReviewOutput
from diffshield.utils.failure_reasons import MISSING_CREDENTIALS

logger = logging.getLogger(__name__)


class SynthesisOutcome:
    """Terminal states of one synthesis attempt."""
    VALID = "VALID"
    UNAVAILABLE = "UNAVAILABLE"
    INVALID = "INVALID"


@dataclass
class SynthesisResult:
    outcome: str
    output: Optional[V2ReviewOutput] = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome == SynthesisOutcome.VALID


async def synthesize_v2_review(
    pr_context: PRContext,
    doc_type: DocTypeClassification,
    semantic_diff: SemanticDiff,
    findings: Sequence[ReviewFinding],
    config: MiniMaxConfig,
    code_files: Optional[Sequence[CodeFileInfo]] = None,
    client: Optional[MiniMaxClient] = None,
) -> SynthesisResult:
    """
    Run one rich review attempt and report its terminal outcome.

    Parameters
    ----------
    pr_context : PRContext
        PR metadata.
    doc_type : DocTypeClassification
        Classifier output.
    semantic_diff : SemanticDiff
        Section-level diff.
    findings : Sequence[ReviewFinding]
        Static findings.
    config : MiniMaxConfig
        Credentials for this call.
    code_files : Sequence[CodeFileInfo] or None
        Changed code files.
    client : MiniMaxClient or None
        HTTP client (auto-created if not provided).

    Returns
    -------
    SynthesisResult
    """
    if not config.api_key or not config.group_id:
        logger.warning("MiniMax credentials missing, skipping rich review")
        return SynthesisResult(SynthesisOutcome.UNAVAILABLE, reason=MISSING_CREDENTIALS)

    prompt = build_rich_prompt(pr_context, doc_type, semantic_diff, findings, code_files or [])
    client = client or MiniMaxClient()

    completion = await client.complete(
        prompt, config, max_tokens=RICH_MAX_TOKENS, temperature=REVIEW_TEMPERATURE
    )
    if not completion.success:
        logger.warning("Rich review unavailable: %s", completion.error or completion.reason)
        return SynthesisResult(SynthesisOutcome.UNAVAILABLE, reason=completion.reason)

    output, reason = parse_v2_response_detailed(completion.content)
    if output is None:
        logger.warning("Rich review response rejected: %s", reason)
        return SynthesisResult(SynthesisOutcome.INVALID, reason=reason or "")

    logger.info("Rich review parsed: verdict=%s", output.verdict.verdict)
    return SynthesisResult(SynthesisOutcome.VALID, output=output)


async def generate_v2_review(
    pr_context: PRContext,
    doc_type: DocTypeClassification,
    semantic_diff: SemanticDiff,
    findings: Sequence[ReviewFinding],
    config: MiniMaxConfig,
    code_files: Optional[Sequence[CodeFileInfo]] = None,
    client: Optional[MiniMaxClient] = None,
) -> Optional[V2ReviewOutput]:
    """Return the structured review, or None when unavailable or invalid."""
    result = await synthesize_v2_review(
        pr_context, doc_type, semantic_diff, findings, config, code_files, client
    )
    return result.output
