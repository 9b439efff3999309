from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class PullRequestEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    number: int
    action: str

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "PullRequestEvent":
        repository = payload["repository"]
        return cls(
            owner=repository["owner"]["login"],
            repo=repository["name"],
            number=payload["number"],
            action=payload["action"],
        )


class PingEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    zen: str | None = None
    hook_id: int | None = None


class UnhandledEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_type: str


WebhookEvent = PullRequestEvent | PingEvent | UnhandledEvent


class CommitRecord(BaseModel):
    sha: str
    message: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CommitRecord":
        return cls(sha=data["sha"], message=data["commit"]["message"])


class Verdict(BaseModel):
    signed: bool
    state: Literal["success", "failure"]
    description: str
    target_url: str


class Repository(BaseModel):
    owner: str
    name: str
    full_name: str
    default_branch: str = "master"
    html_url: str
    contents_url: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Repository":
        return cls(
            owner=data["owner"]["login"],
            name=data["name"],
            full_name=data["full_name"],
            default_branch=data.get("default_branch") or "master",
            html_url=data["html_url"],
            contents_url=data["contents_url"],
        )


class WebhookConfig(BaseModel):
    url: str
    secret: str
    content_type: Literal["json"] = "json"
    events: list[str] = Field(default_factory=lambda: ["pull_request"])
    active: bool = True

    def to_request(self) -> dict[str, Any]:
        return {
            "name": "web",
            "events": list(self.events),
            "active": self.active,
            "config": {
                "url": self.url,
                "secret": self.secret,
                "content_type": self.content_type,
            },
        }


# Toggles that GET wraps as {"enabled": ...} and PUT takes as plain booleans.
PROTECTION_FLAGS = (
    "required_linear_history",
    "allow_force_pushes",
    "allow_deletions",
    "block_creations",
    "required_conversation_resolution",
    "lock_branch",
    "allow_fork_syncing",
)

REVIEW_SETTINGS = (
    "dismiss_stale_reviews",
    "require_code_owner_reviews",
    "required_approving_review_count",
    "require_last_push_approval",
)


def _actors(data: dict[str, Any] | None) -> dict[str, list[str]]:
    """Reduce GET user/team/app objects to the logins and slugs PUT expects."""
    data = data or {}
    return {
        "users": [user["login"] for user in data.get("users", [])],
        "teams": [team["slug"] for team in data.get("teams", [])],
        "apps": [app["slug"] for app in data.get("apps", [])],
    }


class BranchProtectionConfig(BaseModel):
    enforce_admins: bool = True
    strict: bool = False
    contexts: list[str] = Field(default_factory=list)
    # set when the rule pins checks to apps; PUT then takes checks, not contexts
    checks: list[dict[str, Any]] | None = None
    required_pull_request_reviews: dict[str, Any] | None = None
    restrictions: dict[str, Any] | None = None
    flags: dict[str, bool] = Field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "BranchProtectionConfig":
        """Build from a GET .../protection response.

        The GET shape differs from what PUT accepts: flags are wrapped in
        ``{"enabled": ...}`` objects and actor lists hold full user, team and
        app objects instead of logins and slugs.
        """
        checks = data.get("required_status_checks")
        enforce_admins = (data.get("enforce_admins") or {}).get("enabled", False)

        pinned_checks = None
        if checks and checks.get("checks") is not None:
            # app_id null means any source; PUT expresses that by omitting it
            pinned_checks = [
                {
                    key: check[key]
                    for key in ("context", "app_id")
                    if check.get(key) is not None
                }
                for check in checks["checks"]
            ]

        reviews = None
        if existing_reviews := data.get("required_pull_request_reviews"):
            reviews = {
                key: existing_reviews[key]
                for key in REVIEW_SETTINGS
                if key in existing_reviews
            }
            for key in ("dismissal_restrictions", "bypass_pull_request_allowances"):
                if key in existing_reviews:
                    reviews[key] = _actors(existing_reviews[key])

        restrictions = None
        if existing_restrictions := data.get("restrictions"):
            restrictions = _actors(existing_restrictions)

        flags = {
            key: bool((data.get(key) or {}).get("enabled", False))
            for key in PROTECTION_FLAGS
            if key in data
        }

        return cls(
            enforce_admins=enforce_admins,
            strict=checks.get("strict", False) if checks else False,
            contexts=list(checks.get("contexts", [])) if checks else [],
            checks=pinned_checks,
            required_pull_request_reviews=reviews,
            restrictions=restrictions,
            flags=flags,
        )

    def add_context(self, context: str) -> "BranchProtectionConfig":
        """Return a copy requiring ``context``; existing checks keep their order."""
        contexts = list(self.contexts)
        if context not in contexts:
            contexts.append(context)

        checks = self.checks
        if checks is not None and not any(c["context"] == context for c in checks):
            checks = [*checks, {"context": context}]

        return self.model_copy(update={"contexts": contexts, "checks": checks})

    def to_request(self) -> dict[str, Any]:
        status_checks: dict[str, Any] = {"strict": self.strict}
        if self.checks is not None:
            status_checks["checks"] = [dict(check) for check in self.checks]
        else:
            status_checks["contexts"] = list(self.contexts)

        return {
            "required_status_checks": status_checks,
            "enforce_admins": self.enforce_admins,
            "required_pull_request_reviews": self.required_pull_request_reviews,
            "restrictions": self.restrictions,
            **self.flags,
        }
