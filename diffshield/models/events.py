"""
Webhook Event Models
====================
GitHub webhook payloads validated once at the HTTP boundary into explicit
event types. Only the subset of fields the service reads is modelled;
unknown fields are ignored.

Event types:
    InstallationEvent   — X-GitHub-Event: installation
    PullRequestEvent    — X-GitHub-Event: pull_request
    UnsupportedEvent    — anything else (acknowledged, not processed)
"""
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel

from .pr_context import PRContext


class GitHubInstallation(BaseModel):
    id: int


class GitHubRepository(BaseModel):
    full_name: str


class GitHubUser(BaseModel):
    login: str


class GitHubRef(BaseModel):
    ref: str


class GitHubPullRequest(BaseModel):
    number: int
    title: str
    body: Optional[str] = None
    user: Optional[GitHubUser] = None
    base: GitHubRef
    head: GitHubRef


class InstallationEvent(BaseModel):
    event: Literal["installation"] = "installation"
    action: str
    installation: GitHubInstallation


class PullRequestEvent(BaseModel):
    event: Literal["pull_request"] = "pull_request"
    action: str
    pull_request: GitHubPullRequest
    repository: Optional[GitHubRepository] = None
    installation: Optional[GitHubInstallation] = None

    def to_pr_context(self) -> PRContext:
        pr = self.pull_request
        return PRContext(
            title=pr.title,
            body=pr.body or None,
            author=pr.user.login if pr.user else "",
            base_ref=pr.base.ref,
            head_ref=pr.head.ref,
        )


class UnsupportedEvent(BaseModel):
    event: str
    action: Optional[str] = None


WebhookEvent = Union[InstallationEvent, PullRequestEvent, UnsupportedEvent]


def parse_webhook_event(event_type: str, payload: Dict[str, Any]) -> WebhookEvent:
    """
    Validate a raw webhook payload into its event type.

    Raises
    ------
    pydantic.ValidationError
        If a supported event is missing required fields.
    """
    if event_type == "installation":
        return InstallationEvent.model_validate(payload)
    if event_type == "pull_request":
        return PullRequestEvent.model_validate(payload)
    action = payload.get("action")
    return UnsupportedEvent(
        event=event_type or "unknown",
        action=action if isinstance(action, str) else None,
    )
