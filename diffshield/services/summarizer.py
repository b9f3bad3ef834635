"""
Legacy Summarizer
=================
Schema-free fallback that asks the model for a short plain-text summary.

Differences from the rich review:
    - Short prompt: numeric stats plus a few warning messages
    - No JSON parsing; the stripped model text is the result
    - Every failure collapses to "" so callers can treat "no summary" as a
      safe default

Variants:
    brief     — one sentence, max_tokens 50 (default)
    detailed  — two or three sentences, max_tokens 200

generate_pr_description is an alias of generate_ai_summary.
"""
import logging
from typing import Optional, Sequence

from diffshield.core.config import LEGACY_SUMMARY_VARIANT, MiniMaxConfig
from diffshield.core.constants import (
    LEGACY_BRIEF_MAX_TOKENS,
    LEGACY_DETAILED_MAX_TOKENS,
    REVIEW_TEMPERATURE,
)
from diffshield.llm.client import MiniMaxClient
from diffshield.llm.prompts import build_legacy_prompt
from diffshield.models.analysis import DocTypeClassification, ReviewFinding, SemanticDiff
from diffshield.models.pr_context import CodeFileInfo

logger = logging.getLogger(__name__)

LEGACY_MAX_TOKENS = {
    "brief": LEGACY_BRIEF_MAX_TOKENS,
    "detailed": LEGACY_DETAILED_MAX_TOKENS,
}


async def generate_ai_summary(
    doc_type: DocTypeClassification,
    diff: SemanticDiff,
    findings: Sequence[ReviewFinding],
    config: MiniMaxConfig,
    code_files: Optional[Sequence[CodeFileInfo]] = None,
    variant: Optional[str] = None,
    client: Optional[MiniMaxClient] = None,
) -> str:
    """
    Generate a short plain-text summary of the documentation change.

    Returns "" on missing credentials, transport errors and non-2xx
    responses. Never raises.
    """
    if not config.api_key or not config.group_id:
        logger.warning("MiniMax credentials missing, skipping legacy summary")
        return ""

    variant = variant or LEGACY_SUMMARY_VARIANT
    if variant not in LEGACY_MAX_TOKENS:
        logger.warning("Unknown legacy summary variant %r, using 'brief'", variant)
        variant = "brief"

    prompt = build_legacy_prompt(doc_type, diff, findings, variant=variant, code_files=code_files)
    client = client or MiniMaxClient()

    completion = await client.complete(
        prompt,
        config,
        max_tokens=LEGACY_MAX_TOKENS[variant],
        temperature=REVIEW_TEMPERATURE,
    )
    if not completion.success:
        return ""
    return completion.content.strip()


generate_pr_description = generate_ai_summary
