# File: servers/git-collect/src/mcp_git_collect/engine/changelog.py
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Union

from common.git_utils import GitClient

from ..errors import ChangelogGenerationError
from ..models.repo_snapshot import RepositorySnapshot


class ChangelogGenerator:
    """
    Writes the commits in `marked..built` to a file in the run directory.

    Never fails the caller: on any error the partial file is removed, the
    failure is logged and None is returned.
    """

    def __init__(self, log: Any, prefix: str = "changelog"):
        self.log = log
        self.prefix = prefix

    def generate(
        self,
        run_root_dir: Union[str, Path],
        git: GitClient,
        snapshot: RepositorySnapshot,
    ) -> Optional[Path]:
        marked = snapshot.marked_revision.commit_id
        built = snapshot.built_revision.commit_id
        if not snapshot.has_changes:
            self.log.info("changelog.skipped", reason="marked equals built", commit=built)
            return None

        path: Optional[Path] = None
        try:
            run_root = Path(run_root_dir)
            run_root.mkdir(parents=True, exist_ok=True)
            # mkstemp creates with O_EXCL and mode 0600 where the platform has POSIX bits
            fd, name = tempfile.mkstemp(prefix=self.prefix, suffix=".txt", dir=str(run_root))
            path = Path(name)
            with os.fdopen(fd, "wb") as out:
                git.stream_changelog(marked, built, out)
        except (Exception, KeyboardInterrupt) as e:
            if path is not None:
                path.unlink(missing_ok=True)
            err = ChangelogGenerationError(
                f"changelog {marked}..{built} failed: {e}",
                {"marked": marked, "built": built},
            )
            self.log.warning("changelog.failed", error=err.message, exc_type=type(e).__name__)
            return None

        self.log.info("changelog.written", path=str(path), marked=marked, built=built)
        return path
