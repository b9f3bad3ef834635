"""
Review Output Model
===================
Structured review produced by the rich review strategy.

Only the top level is validated (see llm/review_parser.py). Entries inside
key_risks, checklist and pr_body_suggestion are typed as TypedDicts to
document the requested shape, but they are passed through exactly as the
model produced them.

Fields (V2ReviewOutput):
    pr_intent           — one-line statement of what the PR is for (required)
    change_overview     — short description of what changed (required)
    key_risks           — RiskItem entries, [] when absent
    checklist           — ReviewerChecklistItem entries, [] when absent
    pr_body_suggestion  — PRBodySuggestion, {"sections": []} when absent
    verdict             — V2Verdict (required, sub-fields defaulted)
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, TypedDict

from diffshield.core.constants import DEFAULT_VERDICT, DEFAULT_VERDICT_CONFIDENCE

# Allowed values requested from the model (documented in the prompt, not enforced)
RISK_SEVERITIES = ("high", "medium", "low")
RISK_CATEGORIES = ("security", "breaking", "docs", "performance", "testing")
CHECKLIST_CATEGORIES = ("security", "docs", "testing", "performance")
CHECKLIST_PRIORITIES = ("required", "recommended", "optional")
VERDICTS = ("approved", "changes_requested", "commented")


class RiskItem(TypedDict, total=False):
    severity: str
    category: str
    description: str
    evidence: str
    suggestion: str


class ReviewerChecklistItem(TypedDict, total=False):
    category: str
    item: str
    priority: str


class PRBodySection(TypedDict, total=False):
    heading: str
    content: str


class PRBodySuggestion(TypedDict, total=False):
    sections: List[PRBodySection]


def empty_pr_body_suggestion() -> PRBodySuggestion:
    return {"sections": []}


@dataclass
class V2Verdict:
    verdict: str = DEFAULT_VERDICT
    confidence: float = DEFAULT_VERDICT_CONFIDENCE
    summary: str = ""


@dataclass
class V2ReviewOutput:
    pr_intent: Any
    change_overview: Any
    verdict: V2Verdict
    key_risks: List[RiskItem] = field(default_factory=list)
    checklist: List[ReviewerChecklistItem] = field(default_factory=list)
    pr_body_suggestion: PRBodySuggestion = field(default_factory=empty_pr_body_suggestion)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise with the camelCase keys used in the model's JSON contract."""
        return {
            "prIntent": self.pr_intent,
            "changeOverview": self.change_overview,
            "keyRisks": self.key_risks,
            "checklist": self.checklist,
            "prBodySuggestion": self.pr_body_suggestion,
            "verdict": {
                "verdict": self.verdict.verdict,
                "confidence": self.verdict.confidence,
                "summary": self.verdict.summary,
            },
        }
