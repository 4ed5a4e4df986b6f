"""Release-track suggestions for denied gcloud commands.

When a command is rejected by the access control list, the same command may
still be permitted on another release track, e.g. ``beta compute instances
list`` when only ``compute instances list`` is allowed. Candidates are tried
one at a time in the order GA, beta, alpha; ``preview`` is never suggested.
Each candidate costs one lint call, so the search stops at the first
permitted candidate.
"""

from typing import Awaitable, Callable, List, Optional, Sequence

from gcloud_mcp.logger import logger
from gcloud_mcp.schema import ParsedGcloudLintResult, ReleaseTrack, SuggestionCandidate
from gcloud_mcp.security.acl import AccessControlList

LintFunction = Callable[[str], Awaitable[ParsedGcloudLintResult]]

SUGGESTION_PRIORITY = (ReleaseTrack.GA, ReleaseTrack.BETA, ReleaseTrack.ALPHA)


def parse_release_track(command: str) -> ReleaseTrack:
    """Return the release track of a command string or argument, GA if none."""
    tokens = command.split()
    return ReleaseTrack.from_token(tokens[0] if tokens else None)


def build_candidate(args: Sequence[str], track: ReleaseTrack) -> SuggestionCandidate:
    """Rewrite ``args`` for ``track``, leaving flags and positionals in place."""
    current = parse_release_track(args[0]) if args else ReleaseTrack.GA
    rest: List[str] = list(args[1:]) if current is not ReleaseTrack.GA else list(args)
    if track is ReleaseTrack.GA:
        return SuggestionCandidate(release_track=track, args=rest)
    return SuggestionCandidate(release_track=track, args=[track.value, *rest])


def candidate_tracks(current: ReleaseTrack) -> List[ReleaseTrack]:
    return [track for track in SUGGESTION_PRIORITY if track is not current]


async def _lint_quietly(lint: LintFunction, command: str) -> Optional[str]:
    """Lint ``command`` and return the parsed command, or None if it is not viable."""
    try:
        result = await lint(command)
    except Exception as e:
        logger.debug(f"Lint failed for suggestion candidate '{command}': {e}")
        return None
    if not result.success:
        logger.debug(f"Suggestion candidate '{command}' is not valid: {result.error}")
        return None
    return result.parsed_command


async def find_suggested_alternative_command(
    args: Sequence[str],
    acl: AccessControlList,
    lint: LintFunction,
) -> Optional[str]:
    """Find a permitted equivalent of a denied command on another release track.

    Args:
        args: The raw gcloud arguments that were denied
        acl: Access control list used to evaluate each candidate
        lint: Canonicalizer coroutine, usually ``GcloudExecutable.lint``

    Returns:
        The suggested command prefixed with ``gcloud``, or None
    """
    if await _lint_quietly(lint, " ".join(args)) is None:
        return None

    current = parse_release_track(args[0]) if args else ReleaseTrack.GA

    for track in candidate_tracks(current):
        candidate = build_candidate(args, track)
        parsed_command = await _lint_quietly(lint, candidate.command_string)
        if parsed_command is None:
            continue

        if acl.check(parsed_command).permitted:
            logger.info(f"Suggesting alternative command: {candidate.suggestion}")
            return candidate.suggestion

    return None
