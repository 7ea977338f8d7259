"""Git diff ingestion helper."""

from __future__ import annotations

import logging
import subprocess
from datetime import datetime, timezone

from ..storage.base import Store
from .ingest import content_hash

logger = logging.getLogger(__name__)

GIT_DIFF_TIMEOUT_SECONDS = 30.0
MAX_DIFF_BYTES = 10 * 1024 * 1024


def collect_git_diff(repo_path: str, timeout: float = GIT_DIFF_TIMEOUT_SECONDS) -> str | None:
    """Run ``git diff HEAD`` in ``repo_path``; None on any failure."""
    try:
        completed = subprocess.run(
            ["git", "diff", "HEAD"],
            cwd=repo_path,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=True,
        )
    except (OSError, subprocess.SubprocessError) as err:
        logger.warning("git diff failed in %s: %s", repo_path, err)
        return None

    diff = completed.stdout
    if len(diff.encode("utf-8")) > MAX_DIFF_BYTES:
        logger.warning("git diff in %s exceeds %d bytes, skipping", repo_path, MAX_DIFF_BYTES)
        return None
    return diff


def ingest_git_diff(
    store: Store,
    session_id: str,
    repo_path: str,
    timeout: float = GIT_DIFF_TIMEOUT_SECONDS,
) -> str | None:
    """Capture the working-tree diff of ``repo_path`` as a ``repo_diff`` artifact.

    Best effort: returns None when git fails or there are no changes. Store
    failures still propagate.

    Returns:
        The new artifact id, or None
    """
    diff = collect_git_diff(repo_path, timeout)
    if not diff or not diff.strip():
        logger.debug("No git changes to ingest in %s", repo_path)
        return None

    version_hash = content_hash(diff)
    artifact_id = store.put_artifact(
        session_id,
        "repo_diff",
        repo_path,
        version_hash,
        diff,
        {"timestamp": datetime.now(timezone.utc).isoformat()},
    )
    store.append_event(
        session_id,
        "repo_diff",
        {"artifactId": artifact_id, "repoPath": repo_path, "versionHash": version_hash},
    )
    logger.info("Ingested git diff %s for session %s", artifact_id, session_id)
    return artifact_id
