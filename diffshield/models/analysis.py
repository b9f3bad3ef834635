"""
Analysis Models
===============
Pydantic models for the precomputed signals handed to the review pipeline.
These are produced by collaborators (document classifier, section differ,
static checks) and are never recomputed here.

Fields (DocTypeClassification):
    type        — document category (readme, sop, adr, changelog, ...)
    confidence  — classifier confidence, 0.0–1.0

Fields (SemanticDiff):
    stats       — DiffStats counts (added / removed / modified / moved)
    sections    — ordered SectionChange entries, one per changed section

SectionChange is a tagged union on ``type``:
    added       — new_heading
    removed     — old_heading
    modified    — new_heading
    moved       — new_heading

Fields (ReviewFinding):
    kind        — "error" | "warning" | "info"
    file        — file the finding refers to, None for repo-wide findings
    message     — human-readable finding text
"""
from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field

from .base import CamelModel


class DocTypeClassification(CamelModel):
    type: str
    confidence: float = 0.0


class DiffStats(CamelModel):
    added: int = Field(default=0, ge=0)
    removed: int = Field(default=0, ge=0)
    modified: int = Field(default=0, ge=0)
    moved: int = Field(default=0, ge=0)


class AddedSection(CamelModel):
    type: Literal["added"] = "added"
    new_heading: str


class RemovedSection(CamelModel):
    type: Literal["removed"] = "removed"
    old_heading: str


class ModifiedSection(CamelModel):
    type: Literal["modified"] = "modified"
    new_heading: str


class MovedSection(CamelModel):
    type: Literal["moved"] = "moved"
    new_heading: str


SectionChange = Annotated[
    Union[AddedSection, RemovedSection, ModifiedSection, MovedSection],
    Field(discriminator="type"),
]


class SemanticDiff(CamelModel):
    stats: DiffStats = Field(default_factory=DiffStats)
    sections: List[SectionChange] = []


class ReviewFinding(CamelModel):
    kind: Literal["error", "warning", "info"]
    file: Optional[str] = None
    message: str
