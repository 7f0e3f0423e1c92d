"""Pull request snapshot as returned by the hosting service."""

from datetime import datetime
from typing import Literal, Tuple

from pydantic import BaseModel, ConfigDict


class Branch(BaseModel):
    """Base or head side of a pull request."""

    model_config = ConfigDict(frozen=True)

    name: str
    ref: str
    clone_url: str = ""


class Commit(BaseModel):
    """Latest commit on the pull request head."""

    model_config = ConfigDict(frozen=True)

    sha: str
    message: str = ""
    author: str = ""
    author_email: str = ""
    committed_at: datetime


class PullRequest(BaseModel):
    """Pull request with its tip commit.

    Fetched once per resolution pass and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    number: int
    title: str = ""
    url: str = ""
    base: Branch
    head: Branch
    state: Literal["open", "closed"] = "open"
    merged: bool = False
    merged_at: datetime | None = None
    closed_at: datetime | None = None
    labels: Tuple[str, ...] = ()
    tip: Commit


def updated_date(pr: PullRequest) -> datetime:
    """Return the last time a PR was updated, either by commit or by being
    closed/merged."""
    if pr.state == "closed" and pr.merged and pr.merged_at is not None:
        return pr.merged_at
    if pr.state == "closed" and not pr.merged and pr.closed_at is not None:
        return pr.closed_at
    return pr.tip.committed_at
