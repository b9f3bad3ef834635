"""
Constants
Centralised storage for prompt limits, sentinels, and model call settings.
"""
SERVICE_NAME = "DiffShield"
SERVICE_VERSION = "1.0.0"

# Prompt size bounds
MAX_PROMPT_SECTION_CHANGES = 10
MAX_PROMPT_FINDINGS = 10
MAX_SUMMARY_WARNINGS = 5

# Sentinels rendered when a prompt block would be empty
NO_CODE_FILES = "No code files changed"
NO_SECTION_CHANGES = "No section-level changes detected"
NO_CRITICAL_ISSUES = "No critical issues found"
NO_DESCRIPTION = "(no description)"
GENERAL_FILE_LABEL = "general"

# Model call settings
REVIEW_TEMPERATURE = 0.3
RICH_MAX_TOKENS = 2000
LEGACY_BRIEF_MAX_TOKENS = 50
LEGACY_DETAILED_MAX_TOKENS = 200

# Verdict defaults applied by the response parser
DEFAULT_VERDICT = "commented"
DEFAULT_VERDICT_CONFIDENCE = 0.5

# PR actions that trigger a review
REVIEWABLE_PR_ACTIONS = ("opened", "synchronize")
