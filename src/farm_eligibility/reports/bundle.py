from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from farm_eligibility.config import resolve_report_root

from .determinism import canonical_json_bytes, sha256_file


@dataclass(frozen=True)
class ArtifactRecord:
    relpath: str
    sha256: str
    size_bytes: int


def sanitize_id(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("empty id")
    return re.sub(r"[^A-Za-z0-9._-]+", "_", value)


def bundle_dir(
    *,
    bundle_id: str,
    bundle_date: str | None = None,
    report_root: str | Path | None = None,
) -> Path:
    """Compute the bundle directory path.

    Layout: <root>/<YYYY-MM-DD>/<bundle_id>/

    If bundle_date is omitted, uses the current UTC date.
    """

    root = resolve_report_root(report_root)
    if bundle_date is None:
        bundle_date = datetime.now(timezone.utc).date().strftime("%Y-%m-%d")

    return root / bundle_date / bundle_id


def write_manifest(bundle_dir: str | Path, artifacts: Iterable[str | Path]) -> bytes:
    """Write `manifest.json` in bundle_dir and return the bytes written.

    Artifacts are recorded with sha256 and size, sorted by relpath.
    """

    bdir = Path(bundle_dir)
    records: list[ArtifactRecord] = []

    for artifact in artifacts:
        p = Path(artifact)
        records.append(
            ArtifactRecord(
                relpath=p.relative_to(bdir).as_posix(),
                sha256=sha256_file(p),
                size_bytes=p.stat().st_size,
            )
        )

    records_sorted = sorted(records, key=lambda r: r.relpath)

    manifest_obj = {
        "manifest_version": "eligibility_manifest_v1",
        "artifacts": [
            {"relpath": r.relpath, "sha256": r.sha256, "size_bytes": r.size_bytes}
            for r in records_sorted
        ],
    }

    manifest_bytes = canonical_json_bytes(manifest_obj) + b"\n"

    bdir.mkdir(parents=True, exist_ok=True)
    (bdir / "manifest.json").write_bytes(manifest_bytes)
    return manifest_bytes
