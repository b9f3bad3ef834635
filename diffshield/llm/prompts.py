"""
LLM Prompts
===========
Centralised builders for the review and summary prompts.

Prompt Design Rules:
    - Deterministic: the same inputs always produce the same prompt string
    - Bounded: section changes and findings are capped before rendering
    - Complete: every block renders a sentinel instead of going missing
    - JSON-only: the rich prompt spells out the full response schema and
      forbids any surrounding prose

Rich Review Prompt:
    - PR metadata (title, author, branches, description)
    - Document type with its confidence as an integer percentage
    - Section stats embedded verbatim
    - First MAX_PROMPT_SECTION_CHANGES section changes, one line each
    - Every changed code file as "filename: +additions/-deletions"
    - First MAX_PROMPT_FINDINGS error/warning findings (info is never shown)
    - Schema block listing field names, enum values and numeric ranges

Legacy Summary Prompt:
    - Numeric stats plus up to MAX_SUMMARY_WARNINGS warning messages
    - "brief" variant asks for one short sentence
    - "detailed" variant asks for two or three sentences
"""
import logging
from typing import List, Optional, Sequence

from diffshield.core.constants import (
    GENERAL_FILE_LABEL,
    MAX_PROMPT_FINDINGS,
    MAX_PROMPT_SECTION_CHANGES,
    MAX_SUMMARY_WARNINGS,
    NO_CODE_FILES,
    NO_CRITICAL_ISSUES,
    NO_DESCRIPTION,
    NO_SECTION_CHANGES,
)
from diffshield.models.analysis import (
    AddedSection,
    DocTypeClassification,
    ModifiedSection,
    MovedSection,
    RemovedSection,
    ReviewFinding,
    SectionChange,
    SemanticDiff,
)
from diffshield.models.pr_context import CodeFileInfo, PRContext
from diffshield.models.review_output import (
    CHECKLIST_CATEGORIES,
    CHECKLIST_PRIORITIES,
    RISK_CATEGORIES,
    RISK_SEVERITIES,
    VERDICTS,
)

logger = logging.getLogger(__name__)

LEGACY_VARIANTS = ("brief", "detailed")

# Finding kinds worth surfacing to the model
_SURFACED_FINDING_KINDS = ("error", "warning")


# ---------------------------------------------------------------------------
# Block formatters
# ---------------------------------------------------------------------------
def format_code_files(code_files: Sequence[CodeFileInfo]) -> str:
    """One line per file in input order, never truncated."""
    if not code_files:
        return NO_CODE_FILES
    return "\n".join(
        f"{f.filename}: +{f.additions}/-{f.deletions}" for f in code_files
    )


def format_section_change(change: SectionChange) -> str:
    if isinstance(change, AddedSection):
        return f"+ {change.new_heading} (added)"
    if isinstance(change, RemovedSection):
        return f"- {change.old_heading} (removed)"
    if isinstance(change, ModifiedSection):
        return f"~ {change.new_heading} (modified)"
    if isinstance(change, MovedSection):
        return f"» {change.new_heading} (moved)"
    raise TypeError(f"Unknown section change: {change!r}")


def format_section_changes(sections: Sequence[SectionChange]) -> str:
    shown = list(sections[:MAX_PROMPT_SECTION_CHANGES])
    if not shown:
        return NO_SECTION_CHANGES
    return "\n".join(format_section_change(c) for c in shown)


def format_findings(findings: Sequence[ReviewFinding]) -> str:
    """Errors and warnings only, first MAX_PROMPT_FINDINGS in original order."""
    surfaced = [f for f in findings if f.kind in _SURFACED_FINDING_KINDS]
    surfaced = surfaced[:MAX_PROMPT_FINDINGS]
    if not surfaced:
        return NO_CRITICAL_ISSUES
    return "\n".join(
        f"[{f.kind.upper()}] {f.file or GENERAL_FILE_LABEL}: {f.message}"
        for f in surfaced
    )


def format_confidence(confidence: float) -> int:
    return int(round(confidence * 100))


def _enum(values: Sequence[str]) -> str:
    return " | ".join(f'"{v}"' for v in values)


def build_schema_instructions() -> str:
    """Instruction block describing the exact JSON response contract."""
    return (
        "RESPONSE FORMAT — you MUST respond with ONLY a single valid JSON object\n"
        "matching this schema:\n"
        "{\n"
        '  "prIntent": "<one sentence: what this PR is trying to achieve>",\n'
        '  "changeOverview": "<2-3 sentences: what actually changed>",\n'
        '  "keyRisks": [\n'
        "    {\n"
        f'      "severity": {_enum(RISK_SEVERITIES)},\n'
        f'      "category": {_enum(RISK_CATEGORIES)},\n'
        '      "description": "<what could go wrong>",\n'
        '      "evidence": "<section, file or finding that shows it>",\n'
        '      "suggestion": "<how to address it>"\n'
        "    }\n"
        "  ],\n"
        '  "checklist": [\n'
        "    {\n"
        f'      "category": {_enum(CHECKLIST_CATEGORIES)},\n'
        '      "item": "<what the reviewer should check>",\n'
        f'      "priority": {_enum(CHECKLIST_PRIORITIES)}\n'
        "    }\n"
        "  ],\n"
        '  "prBodySuggestion": {\n'
        '    "sections": [{"heading": "<heading>", "content": "<markdown>"}]\n'
        "  },\n"
        '  "verdict": {\n'
        f'    "verdict": {_enum(VERDICTS)},\n'
        '    "confidence": <number between 0.0 and 1.0>,\n'
        '    "summary": "<one sentence justification>"\n'
        "  }\n"
        "}\n"
        "\n"
        "RULES:\n"
        "- prIntent, changeOverview and verdict are REQUIRED.\n"
        "- keyRisks and checklist may be empty arrays.\n"
        "- Use only the enum values listed above.\n"
        "- No other text. No markdown code fences. Just the JSON object."
    )


# ---------------------------------------------------------------------------
# Rich Review Prompt
# ---------------------------------------------------------------------------
def build_rich_prompt(
    pr_context: PRContext,
    doc_type: DocTypeClassification,
    semantic_diff: SemanticDiff,
    findings: Sequence[ReviewFinding],
    code_files: Optional[Sequence[CodeFileInfo]] = None,
) -> str:
    """
    Build the structured review prompt sent to the model.

    Parameters
    ----------
    pr_context : PRContext
        Title, description, author and branches of the PR.
    doc_type : DocTypeClassification
        Classifier output for the changed document.
    semantic_diff : SemanticDiff
        Section-level diff of the document.
    findings : Sequence[ReviewFinding]
        Static findings; only errors and warnings are included.
    code_files : Sequence[CodeFileInfo] or None
        Non-documentation files touched by the PR.

    Returns
    -------
    str
        Complete prompt string.
    """
    stats = semantic_diff.stats
    parts: List[str] = []

    parts.append(
        "You are a senior reviewer for documentation-heavy pull requests. "
        "Review the change described below and produce a structured review."
    )
    parts.append(
        f"PR TITLE: {pr_context.title}\n"
        f"AUTHOR: {pr_context.author}\n"
        f"BRANCHES: {pr_context.head_ref} into {pr_context.base_ref}\n"
        f"PR DESCRIPTION:\n{pr_context.body or NO_DESCRIPTION}"
    )
    parts.append(
        f"DOCUMENT TYPE: {doc_type.type} "
        f"({format_confidence(doc_type.confidence)}% confidence)"
    )
    parts.append(
        "SECTION STATS:\n"
        f"- Added: {stats.added}\n"
        f"- Removed: {stats.removed}\n"
        f"- Modified: {stats.modified}\n"
        f"- Moved: {stats.moved}"
    )
    parts.append(f"SECTION CHANGES:\n{format_section_changes(semantic_diff.sections)}")
    parts.append(f"CODE FILES:\n{format_code_files(code_files or [])}")
    parts.append(f"STATIC FINDINGS:\n{format_findings(findings)}")
    parts.append(build_schema_instructions())

    return "\n\n".join(parts)


# ---------------------------------------------------------------------------
# Legacy Summary Prompt
# ---------------------------------------------------------------------------
def build_legacy_prompt(
    doc_type: DocTypeClassification,
    diff: SemanticDiff,
    findings: Sequence[ReviewFinding],
    variant: str = "brief",
    code_files: Optional[Sequence[CodeFileInfo]] = None,
) -> str:
    """
    Build the schema-free summary prompt.

    Parameters
    ----------
    doc_type : DocTypeClassification
        Classifier output for the changed document.
    diff : SemanticDiff
        Only the numeric stats are used.
    findings : Sequence[ReviewFinding]
        Up to MAX_SUMMARY_WARNINGS warning messages are included.
    variant : str
        "brief" (one sentence) or "detailed" (two or three sentences).
        Unknown values fall back to "brief".
    code_files : Sequence[CodeFileInfo] or None
        When present, the number of changed code files is mentioned.

    Returns
    -------
    str
        Prompt string.
    """
    if variant not in LEGACY_VARIANTS:
        logger.warning("Unknown legacy summary variant %r, using 'brief'", variant)
        variant = "brief"

    stats = diff.stats
    warnings = [f.message for f in findings if f.kind == "warning"][:MAX_SUMMARY_WARNINGS]

    if variant == "brief":
        header = (
            "Write ONE short sentence (max 15 words) summarizing these "
            "documentation changes for a developer:"
        )
        footer = (
            'Example: "Updated installation steps to include new dependency" or '
            '"Added pricing tier for enterprise users"\n'
            "Focus on what changed and why it matters."
        )
    else:
        header = (
            "Write a short summary (2-3 sentences) of these documentation "
            "changes for the pull request reviewer:"
        )
        footer = (
            "Mention what changed, why it matters, and anything the reviewer "
            "should double-check. Plain text only, no markdown."
        )

    lines = [
        header,
        "",
        f"Doc type: {doc_type.type}",
        f"Changes: +{stats.added} added, -{stats.removed} removed, "
        f"~{stats.modified} modified, {stats.moved} moved",
    ]
    if code_files:
        lines.append(f"Code files changed: {len(code_files)}")
    if warnings:
        lines.append("Warnings:\n- " + "\n- ".join(warnings))
    lines.append("")
    lines.append(footer)

    return "\n".join(lines)
