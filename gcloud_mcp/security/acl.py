"""Command access control.

Rules are command-group prefixes such as ``compute instances`` or ``alpha``.
Commands are matched token by token after trimming, lowercasing and splitting
on whitespace, so ``app`` covers ``app deploy`` but never ``apphub``.

Allow and deny rules treat release tracks differently:

* an allow rule matches the command exactly as written, track token included,
  so ``beta storage`` permits only ``beta storage ...``;
* a deny rule without a leading track token blocks the command group on every
  track (GA, ``alpha``, ``beta`` and ``preview``), while a deny rule that
  starts with a track token blocks only that track.

The access control list combines at most one user list (allow or deny) with a
fixed default deny list. Deny rules always win.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from gcloud_mcp.logger import logger
from gcloud_mcp.schema import RELEASE_TRACK_TOKENS, MatchResult

Tokens = Tuple[str, ...]
CommandLike = Union[str, Sequence[str]]


def tokenize(command: CommandLike) -> Tokens:
    """Normalize a command or pattern into lowercase whitespace-separated tokens."""
    if not isinstance(command, str):
        command = " ".join(command)
    return tuple(command.strip().lower().split())


def has_release_track(tokens: Tokens) -> bool:
    return bool(tokens) and tokens[0] in RELEASE_TRACK_TOKENS


def strip_release_track(tokens: Tokens) -> Tokens:
    """Drop a leading release track token, if present."""
    return tokens[1:] if has_release_track(tokens) else tokens


@dataclass(frozen=True)
class Pattern:
    """A normalized command-group prefix."""

    tokens: Tokens

    @classmethod
    def parse(cls, text: str) -> "Pattern":
        return cls(tokenize(text))

    @property
    def has_release_track(self) -> bool:
        return has_release_track(self.tokens)

    def is_prefix_of(self, command: Tokens) -> bool:
        size = len(self.tokens)
        return len(command) >= size and command[:size] == self.tokens

    def matches_allow(self, command: Tokens) -> bool:
        return self.is_prefix_of(command)

    def matches_deny(self, command: Tokens) -> bool:
        if self.has_release_track:
            return self.is_prefix_of(command)
        return self.is_prefix_of(strip_release_track(command))

    def __str__(self) -> str:
        return " ".join(self.tokens)


def _parse_patterns(patterns: Iterable[str]) -> Tuple[Pattern, ...]:
    parsed = []
    for text in patterns:
        pattern = Pattern.parse(text)
        if not pattern.tokens:
            logger.warning(f"Ignoring empty access control pattern: {text!r}")
            continue
        parsed.append(pattern)
    return tuple(parsed)


class RuleSet(ABC):
    """An immutable collection of command patterns."""

    def __init__(self, patterns: Iterable[str] = ()):
        self._patterns = _parse_patterns(patterns)

    @property
    def patterns(self) -> Tuple[Pattern, ...]:
        return self._patterns

    def __len__(self) -> int:
        return len(self._patterns)

    def __iter__(self):
        return iter(self._patterns)

    @abstractmethod
    def matches(self, command: CommandLike) -> bool:
        """Whether the command is covered by this rule set."""


class AllowList(RuleSet):
    """Permits commands that start with one of its patterns.

    An empty allow list places no restriction and matches every command.
    """

    def matches(self, command: CommandLike) -> bool:
        if not self._patterns:
            return True
        tokens = tokenize(command)
        return any(pattern.matches_allow(tokens) for pattern in self._patterns)


class DenyList(RuleSet):
    """Blocks commands that start with one of its patterns. Empty matches nothing."""

    def matches(self, command: CommandLike) -> bool:
        tokens = tokenize(command)
        return any(pattern.matches_deny(tokens) for pattern in self._patterns)

    def union(self, other: "DenyList") -> "DenyList":
        combined = DenyList()
        combined._patterns = self._patterns + other._patterns
        return combined


def allow_commands(patterns: Iterable[str]) -> AllowList:
    return AllowList(patterns)


def deny_commands(patterns: Iterable[str]) -> DenyList:
    return DenyList(patterns)


class AccessControlList:
    """Decides whether a canonical gcloud command may run."""

    def __init__(
        self,
        allow: Optional[Iterable[str]] = None,
        deny: Optional[Iterable[str]] = None,
        default_deny: Iterable[str] = (),
    ):
        self._allow: Optional[AllowList] = allow_commands(allow) if allow is not None else None
        self._deny: Optional[DenyList] = deny_commands(deny) if deny is not None else None
        self._default_deny = deny_commands(default_deny)
        self._effective_deny = (self._deny or DenyList()).union(self._default_deny)

    @property
    def allow_list(self) -> Optional[AllowList]:
        return self._allow

    @property
    def deny_list(self) -> Optional[DenyList]:
        return self._deny

    @property
    def default_deny_list(self) -> DenyList:
        return self._default_deny

    def check(self, canonical_path: str) -> MatchResult:
        tokens = tokenize(canonical_path)
        command = " ".join(tokens)

        if self._effective_deny.matches(tokens):
            return MatchResult(
                permitted=False,
                message=f'Execution denied: The command "gcloud {command}" is denylisted.',
            )

        if self._allow is None or self._allow.matches(tokens):
            return MatchResult(permitted=True)

        return MatchResult(
            permitted=False,
            message=f'Execution denied: The command "gcloud {command}" is not in the allowlist.',
        )

    def print(self) -> str:
        """Render the user-configured rules. Default deny rules are not listed."""
        if self._deny is not None:
            header, patterns = "Denylisted commands:", self._deny.patterns
        elif self._allow is not None:
            header, patterns = "Allowlisted commands:", self._allow.patterns
        else:
            header, patterns = "Denylisted commands:", ()

        lines: List[str] = [header]
        lines.extend(f"- {pattern}" for pattern in patterns)
        return "\n".join(lines)
