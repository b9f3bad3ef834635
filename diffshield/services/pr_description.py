"""
PR Description Renderer
=======================
Renders the model's PR body suggestion as markdown.

STRICT DETERMINISM CONTRACT:
  - This module NEVER calls an LLM.
  - Sections are rendered in input order, never re-sorted or capped.
  - Given the same output, it ALWAYS returns the same markdown.

Format, per section, separated by a blank line:
    ## {heading}

    {content}
"""
from typing import List

from diffshield.models.review_output import V2ReviewOutput


def generate_v2_pr_description(output: V2ReviewOutput) -> str:
    """Return markdown for the suggested PR body, or "" when it has no sections."""
    sections = (output.pr_body_suggestion or {}).get("sections") or []
    if not isinstance(sections, list) or not sections:
        return ""

    blocks: List[str] = []
    for section in sections:
        # Entries are unvalidated model output
        if not isinstance(section, dict):
            continue
        heading = section.get("heading", "")
        content = section.get("content", "")
        blocks.append(f"## {heading}\n\n{content}")
    return "\n\n".join(blocks)
