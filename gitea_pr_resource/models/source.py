"""Source configuration: the filter criteria for one resource."""

from typing import List, Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field

from gitea_pr_resource.errors import ConfigError

StateFilter = Literal["open", "closed", "all"]


class Source(BaseModel):
    """Resource source as configured in the pipeline."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    repository: str = Field(default="", description="Target repo e.g. owner/repo")
    endpoint: str = Field(default="", description="Hosting service base URL")
    access_token: str = Field(default="", description="API token")
    paths: List[str] = Field(default_factory=list, description="Include patterns (match-any)")
    ignore_paths: List[str] = Field(default_factory=list, description="Exclude patterns")
    state: StateFilter = Field(default="open", description="open, closed or all")
    disable_ci_skip: bool = Field(default=False, description="Do not suppress [skip ci] PRs")
    base_branch: str = Field(default="", description="Only PRs targeting this branch")
    labels: List[str] = Field(default_factory=list, description="Required labels (match-any)")

    def validate_source(self) -> None:
        """Check the settings the hosting client needs.

        Raises:
            ConfigError: If a required setting is missing or malformed.
        """
        if not self.access_token:
            raise ConfigError("access_token must be set")
        if not self.repository:
            raise ConfigError("repository must be set")
        if not self.endpoint:
            raise ConfigError("endpoint must be set")
        self.owner_and_name()

    def owner_and_name(self) -> Tuple[str, str]:
        """Split ``owner/repo`` into its two parts."""
        parts = self.repository.split("/")
        if len(parts) != 2:
            raise ConfigError(f"malformed repository string: {self.repository!r}")
        return parts[0], parts[1]
