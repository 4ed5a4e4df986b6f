from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from gcloud_mcp.exceptions import ErrorKind, classify_error


class ReleaseTrack(str, Enum):
    """gcloud release tracks. GA commands carry no track token."""

    GA = ""
    ALPHA = "alpha"
    BETA = "beta"
    PREVIEW = "preview"

    @classmethod
    def from_token(cls, token: Optional[str]) -> "ReleaseTrack":
        """Return the track named by ``token``, or GA if it names none."""
        if not token:
            return cls.GA
        normalized = token.strip().lower()
        for track in (cls.ALPHA, cls.BETA, cls.PREVIEW):
            if normalized == track.value:
                return track
        return cls.GA


RELEASE_TRACK_TOKENS = frozenset(
    track.value for track in ReleaseTrack if track is not ReleaseTrack.GA
)


class MatchResult(BaseModel):
    """Outcome of an access control check."""

    model_config = ConfigDict(frozen=True)

    permitted: bool
    message: str = ""


class ParsedGcloudLintResult(BaseModel):
    """Canonicalization result for a raw gcloud command string.

    On success ``parsed_command`` holds the release track, command groups and
    leaf command with every flag and positional argument removed.
    """

    success: bool
    parsed_command: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, parsed_command: str) -> "ParsedGcloudLintResult":
        return cls(success=True, parsed_command=parsed_command)

    @classmethod
    def failed(cls, error: str) -> "ParsedGcloudLintResult":
        return cls(success=False, error=error)


class LintCommandOutput(BaseModel):
    """One entry of `gcloud meta lint-gcloud-commands` JSON output.

    The command emits more fields; only the ones in use are declared.
    """

    model_config = ConfigDict(extra="ignore")

    command_string_no_args: str
    success: bool
    error_message: Optional[str] = None
    error_type: Optional[str] = None


class GcloudInvocationResult(BaseModel):
    """Exit status and captured output of a finished gcloud process."""

    code: Optional[int] = Field(None, description="Process exit code")
    stdout: str = Field("", description="Captured standard output")
    stderr: str = Field("", description="Captured standard error")

    @property
    def succeeded(self) -> bool:
        return self.code == 0

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        """Failure category derived from stderr, or None for a clean exit."""
        if self.succeeded:
            return None
        return classify_error(self.stderr)


class SuggestionCandidate(BaseModel):
    """A release track and the raw arguments rewritten for it."""

    model_config = ConfigDict(frozen=True)

    release_track: ReleaseTrack
    args: List[str]

    @property
    def command_string(self) -> str:
        return " ".join(self.args)

    @property
    def suggestion(self) -> str:
        return f"gcloud {self.command_string}"
