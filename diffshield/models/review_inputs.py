"""
Review Inputs Model
Bundle of everything one review attempt needs, as handed over by the
collaborator layer for a single pull request.
"""
from typing import List

from .analysis import DocTypeClassification, ReviewFinding, SemanticDiff
from .base import CamelModel
from .pr_context import CodeFileInfo, PRContext


class ReviewInputs(CamelModel):
    pr_context: PRContext
    doc_type: DocTypeClassification
    semantic_diff: SemanticDiff
    findings: List[ReviewFinding] = []
    code_files: List[CodeFileInfo] = []
