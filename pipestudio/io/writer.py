"""
File writer utility – results, summary and metadata for a finished run.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from pipestudio import __version__
from pipestudio.core.compare import ComparisonReport, summarize
from pipestudio.core.result import RunReport
from pipestudio.utils.ids import snake_case

__all__ = ["RunWriter", "write_results"]


class RunWriter:  # noqa: D101
    def __init__(self, root: Path, fmt: str = "json"):
        if fmt not in ("json", "jsonl"):
            raise ValueError(f"Unsupported format '{fmt}' (expected json or jsonl)")
        self.root = Path(root)
        self.fmt = fmt
        self.root.mkdir(parents=True, exist_ok=True)

    # -------------------------------------------------------------- #

    def _write_rows(self, path: Path, rows: List[Dict[str, Any]]) -> Path:
        if self.fmt == "jsonl":
            with open(path, "w", encoding="utf-8") as f:
                for row in rows:
                    f.write(json.dumps(row, ensure_ascii=False) + "\n")
        else:
            path.write_text(json.dumps(rows, indent=2, ensure_ascii=False))
        return path

    def write_report(self, report: RunReport, *, prefix: str = "") -> Path:
        """Write results + summary for *report*; return the results path."""
        stem = f"{snake_case(prefix)}_" if prefix else ""
        results_path = self._write_rows(
            self.root / f"{stem}results.{self.fmt}", [r.to_dict() for r in report.results]
        )

        summary = summarize(report.results)
        (self.root / f"{stem}summary.json").write_text(
            json.dumps(
                {
                    "pipeline": report.pipeline,
                    "run_id": report.run_id,
                    "completed": report.completed,
                    "validation": report.validation.to_dict(),
                    "execution_order": [r.node_id for r in report.results],
                    "status_counts": summary.counts,
                    "average_metrics": summary.averages,
                },
                indent=2,
            )
        )
        self._write_metadata(pipelines=[report.pipeline])
        return results_path

    def write_comparison(self, report: ComparisonReport) -> Path:
        """Write both sides of an A/B run plus the comparison verdict."""
        self.write_report(report.a, prefix="a")
        self.write_report(report.b, prefix="b")
        path = self.root / "comparison.json"
        path.write_text(
            json.dumps(
                {
                    "better": report.better,
                    "summary": report.summary(),
                    "improvements": report.improvements,
                    "differences": report.differences,
                    "quality": {"a": report.quality_a, "b": report.quality_b},
                },
                indent=2,
            )
        )
        self._write_metadata(pipelines=[report.a.pipeline, report.b.pipeline])
        return path

    def _write_metadata(self, *, pipelines: List[str]) -> None:
        meta = {
            "run_dir": str(self.root.resolve()),
            "pipelines": pipelines,
            "format": self.fmt,
            "generated_by": f"pipestudio v{__version__}",
        }
        (self.root / "metadata.json").write_text(json.dumps(meta, indent=2))


def write_results(path: str | Path, report: RunReport) -> Path:
    """Dump *report*'s results as one indented JSON array at *path*."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps([r.to_dict() for r in report.results], indent=2))
    return path
