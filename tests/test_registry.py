"""Tests for engine.registry — dedup, indexing and append-only history."""

from conftest import A, B, C, D, URL
from mcp_git_collect.engine.registry import record_from_snapshot, register
from mcp_git_collect.models.build_record import BuildRecord
from mcp_git_collect.models.repo_snapshot import RepositorySnapshot, RevisionPointer

OTHER_URL = "https://example.com/team/tools.git"


def _snapshot(url=URL, scm="repo", built=D, marked=C, label="master"):
    return RepositorySnapshot(
        scm_name=scm,
        remote_url=url,
        built_revision=RevisionPointer(commit_id=built, label=label),
        marked_revision=RevisionPointer(commit_id=marked, label=label),
    )


class TestRegister:

    def test_first_record_has_no_index(self):
        records, added = register([], _snapshot(), 7)
        assert added
        assert len(records) == 1
        assert records[0].index is None
        assert records[0].remote_urls == frozenset({URL})
        assert records[0].builds[0].run_number == 7
        assert records[0].builds[0].result == "SUCCESS"

    def test_same_snapshot_twice_appends_build(self):
        snap = _snapshot()
        records, _ = register([], snap, 7)
        records, added = register(records, snap, 7)
        assert not added
        assert len(records) == 1
        assert len(records[0].builds) == 2

    def test_two_remotes_two_records(self):
        records, _ = register([], _snapshot(), 7)
        records, added = register(records, _snapshot(url=OTHER_URL, scm="tools"), 7)
        assert added
        assert len(records) == 2
        assert records[0].index is None
        assert records[1].index == 2

    def test_same_url_different_scm_name_is_distinct(self):
        records, _ = register([], _snapshot(), 7)
        records, added = register(records, _snapshot(scm="renamed"), 7)
        assert added
        assert records[1].index == 2

    def test_input_not_mutated_and_order_kept(self):
        first, _ = register([], _snapshot(), 1)
        second, _ = register(first, _snapshot(url=OTHER_URL, scm="tools"), 1)
        third, added = register(second, _snapshot(built=B), 2)
        assert not added
        assert len(first) == 1
        assert len(second[0].builds) == 1
        assert [r.scm_name for r in third] == ["repo", "tools"]
        assert [b.built_revision.commit_id for b in third[0].builds] == [D, B]

    def test_result_recorded(self):
        records, _ = register([], _snapshot(), 3, "UNSTABLE")
        assert records[0].last_build.result == "UNSTABLE"


class TestBuildRecord:

    def test_similarity_ignores_url_order(self):
        a = BuildRecord(scm_name="repo", remote_urls=frozenset({URL, OTHER_URL}))
        b = BuildRecord(scm_name="repo", remote_urls=frozenset({OTHER_URL, URL}), index=3)
        assert a.is_similar_to(b)

    def test_builds_by_branch_name(self):
        rec = record_from_snapshot(_snapshot(built=A, label="main"), 1)
        rec = rec.with_build(record_from_snapshot(_snapshot(built=B, label="dev"), 2).builds[0])
        rec = rec.with_build(record_from_snapshot(_snapshot(built=D, label="main"), 3).builds[0])
        by_branch = rec.builds_by_branch_name
        assert by_branch["main"].run_number == 3
        assert by_branch["dev"].built_revision.commit_id == B
        assert rec.last_build.run_number == 3

    def test_json_round_trip_keeps_similarity(self):
        rec = record_from_snapshot(_snapshot(), 1, index=2)
        restored = BuildRecord.model_validate_json(rec.model_dump_json())
        assert restored.is_similar_to(rec)
        assert restored.index == 2
