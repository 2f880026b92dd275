# File: servers/git-collect/src/mcp_git_collect/engine/registry.py
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..models.build_record import Build, BuildRecord, BuildResult
from ..models.repo_snapshot import RepositorySnapshot


def record_from_snapshot(
    snapshot: RepositorySnapshot,
    run_number: int,
    result: Optional[BuildResult] = None,
    index: Optional[int] = None,
) -> BuildRecord:
    build = Build(
        marked_revision=snapshot.marked_revision,
        built_revision=snapshot.built_revision,
        run_number=run_number,
        result=result or "SUCCESS",
    )
    return BuildRecord(
        scm_name=snapshot.scm_name,
        remote_urls=frozenset({snapshot.remote_url}),
        builds=(build,),
        index=index,
    )


def register(
    existing_records: Sequence[BuildRecord],
    new_snapshot: RepositorySnapshot,
    run_number: int,
    result: Optional[BuildResult] = None,
) -> Tuple[List[BuildRecord], bool]:
    """
    Merge a snapshot into a run's records.

    Returns (updated_records, was_newly_added). A record similar to the
    snapshot (same remote URLs and scm name) is replaced, at the same
    position, by a copy with the build appended, and the flag is False. Otherwise a new record is appended; it
    gets index len(existing)+1 unless it is the first. `existing_records` is
    not modified and no record is ever dropped or moved.
    """
    candidate = record_from_snapshot(new_snapshot, run_number, result)
    records = list(existing_records)

    for pos, rec in enumerate(records):
        if rec.is_similar_to(candidate):
            records[pos] = rec.with_build(candidate.builds[0])
            return records, False

    if records:
        candidate = candidate.model_copy(update={"index": len(records) + 1})
    records.append(candidate)
    return records, True
