# File: servers/git-collect/src/mcp_git_collect/utils/storage.py
from __future__ import annotations

import json
import os
import pathlib
import typing as t

from ..models.build_record import BuildRecord


def records_path(run_dir: str, records_file: str = "build-records.json") -> str:
    pathlib.Path(run_dir).mkdir(parents=True, exist_ok=True)
    return os.path.join(run_dir, records_file)


def write_json(path: str, obj: t.Any) -> None:
    tmp = f"{path}.tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)
    os.replace(tmp, path)


def read_json(path: str) -> t.Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_records(path: str) -> list[BuildRecord]:
    if not os.path.exists(path):
        return []
    return [BuildRecord.model_validate(r) for r in read_json(path)]


def save_records(path: str, records: t.Sequence[BuildRecord]) -> None:
    write_json(path, [r.model_dump(mode="json") for r in records])
