"""Version-control provenance for a SARIF run, read from the local git checkout."""
from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import List, Optional

from packages.schema.errors import ProvenanceError
from packages.schema.sarif import VersionControlDetails

_SSH_REMOTE = re.compile(r"^(?:[^@/]+@)?(?P<host>[^:/\\@]{2,}):(?P<repo>.+?)(?:\.git)?/?$")
_HTTP_REMOTE = re.compile(r"^https?://(?:[^@/]+@)?(?P<host>[^/]+)/(?P<repo>.+?)(?:\.git)?/?$")
_SSH_URL_REMOTE = re.compile(r"^ssh://(?:[^@/]+@)?(?P<host>[^/:]+)(?::\d+)?/(?P<repo>.+?)(?:\.git)?/?$")

DETACHED_HEAD = "(detached head)"


def git_remote_to_public_url(remote: str) -> str:
    """Turn an ssh or http(s) git remote into a browsable https URL."""

    remote = remote.strip()
    match = (
        _HTTP_REMOTE.match(remote)
        or _SSH_URL_REMOTE.match(remote)
        or _SSH_REMOTE.match(remote)
    )
    if match is None:
        raise ProvenanceError(f"Could not parse git remote '{remote}'")
    return f"https://{match.group('host')}/{match.group('repo')}"


def discover_provenance(cwd: Optional[Path] = None) -> VersionControlDetails:
    """Collect repository URL, branch and HEAD commit for the checkout at `cwd`."""

    remote = _git(["config", "--get", "remote.origin.url"], cwd)
    branch = _git(["rev-parse", "--abbrev-ref", "HEAD"], cwd)
    commit = _git(["rev-parse", "HEAD"], cwd)
    return VersionControlDetails(
        repositoryUri=git_remote_to_public_url(remote),
        branch=DETACHED_HEAD if branch == "HEAD" else branch,
        revisionId=commit,
    )


def _git(args: List[str], cwd: Optional[Path]) -> str:
    try:
        completed = subprocess.run(
            ["git", *args],
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as exc:
        raise ProvenanceError("git executable not found") from exc
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
        raise ProvenanceError(f"git {' '.join(args)} failed: {detail}") from exc
    return completed.stdout.strip()


__all__ = ["DETACHED_HEAD", "discover_provenance", "git_remote_to_public_url"]
