"""
PR Context Model
================
Pydantic models describing the pull request under review.

Fields (PRContext):
    title       — PR title
    body        — PR description, None when the author left it empty
    author      — login of the PR author
    base_ref    — target branch name
    head_ref    — source branch name

Fields (CodeFileInfo):
    filename    — path of the changed file, relative to repo root
    additions   — number of added lines
    deletions   — number of deleted lines
    patch       — unified diff hunk, None for binary or oversized files
"""
from typing import Optional

from pydantic import ConfigDict, Field

from .base import CamelModel


class PRContext(CamelModel):
    model_config = ConfigDict(frozen=True)

    title: str
    body: Optional[str] = None
    author: str = ""
    base_ref: str = ""
    head_ref: str = ""


class CodeFileInfo(CamelModel):
    filename: str
    additions: int = Field(default=0, ge=0)
    deletions: int = Field(default=0, ge=0)
    patch: Optional[str] = None
