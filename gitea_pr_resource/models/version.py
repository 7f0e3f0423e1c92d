"""Resource version: the checkpoint the pipeline persists between checks."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_validator

from gitea_pr_resource.models.pull_request import PullRequest, updated_date

# Zero time; admits every pull request in the recency filter
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Version(BaseModel):
    """Pull request number, head commit, update time and state.

    An empty ``pr`` means there is no history yet.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    pr: str = ""
    commit: str = ""
    committed: datetime = ZERO_TIME
    state: str = ""

    @field_validator("committed", mode="after")
    @classmethod
    def _normalize_committed(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @property
    def is_empty(self) -> bool:
        """True when the version carries no pull request."""
        return self.pr == ""


def new_version(pr: PullRequest) -> Version:
    """Build the version for a pull request.

    The hosting service does not normalize timestamps, so the update time
    is converted to UTC here.
    """
    return Version(
        pr=str(pr.number),
        commit=pr.tip.sha,
        committed=_as_utc(updated_date(pr)),
        state=pr.state,
    )
