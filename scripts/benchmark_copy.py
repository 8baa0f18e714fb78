from __future__ import annotations

import argparse
import asyncio
import json
import platform
import shutil
import sys
import tempfile
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from time import perf_counter
from typing import Any

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
sys.path.insert(0, str(SRC_DIR))

from copykit.fs import ReportCopy, copy, copy_sync  # noqa: E402


@dataclass(frozen=True)
class SpecCopyBenchmarkScenario:
    name: str
    n_dirs: int
    n_files_per_dir: int
    n_file_size_bytes: int


@dataclass(frozen=True)
class SpecCopyBenchmarkStats:
    api: str
    scenario: SpecCopyBenchmarkScenario
    repeats: int
    times_seconds: list[float]
    mean_seconds: float
    min_seconds: float
    max_seconds: float
    cnt_files: int
    cnt_dirs: int


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Benchmark copykit.fs.copy_sync against the suspending copy.",
    )
    parser.add_argument("--repeat", type=int, default=3)
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=PROJECT_ROOT / "benchmarks" / "copy" / "results",
    )
    parser.add_argument(
        "--scenario",
        choices=("default", "small"),
        default="default",
    )
    return parser.parse_args()


def build_scenario(name: str) -> SpecCopyBenchmarkScenario:
    if name == "default":
        return SpecCopyBenchmarkScenario(
            name="small_files_10k",
            n_dirs=50,
            n_files_per_dir=200,
            n_file_size_bytes=256,
        )
    if name == "small":
        return SpecCopyBenchmarkScenario(
            name="small_files_500",
            n_dirs=10,
            n_files_per_dir=50,
            n_file_size_bytes=256,
        )
    raise ValueError(f"Unsupported scenario: {name}")


def prepare_source_tree(path_src: Path, scenario: SpecCopyBenchmarkScenario) -> None:
    path_src.mkdir(parents=True, exist_ok=True)

    n_payload_len = max(1, scenario.n_file_size_bytes)
    for n_idx_dir in range(scenario.n_dirs):
        path_dir = path_src / f"d{n_idx_dir:03d}"
        path_dir.mkdir(parents=True, exist_ok=True)
        for n_idx_file in range(scenario.n_files_per_dir):
            payload = (f"{n_idx_dir}-{n_idx_file}-" + ("x" * n_payload_len)).encode(
                "utf-8"
            )[:n_payload_len]
            (path_dir / f"f{n_idx_file:03d}.txt").write_bytes(payload)


def run_single_copy(api: str, path_src: Path, path_dst: Path) -> tuple[float, ReportCopy]:
    if path_dst.exists():
        shutil.rmtree(path_dst)
    n_t0 = perf_counter()
    if api == "sync":
        report = copy_sync(path_src, path_dst)
    else:
        report = asyncio.run(copy(path_src, path_dst))
    return perf_counter() - n_t0, report


def benchmark_api(
    *,
    api: str,
    path_src: Path,
    path_dst: Path,
    scenario: SpecCopyBenchmarkScenario,
    repeat: int,
) -> SpecCopyBenchmarkStats:
    l_times: list[float] = []
    report_last: ReportCopy | None = None

    for _ in range(repeat):
        n_elapsed, report_last = run_single_copy(api, path_src, path_dst)
        l_times.append(n_elapsed)

    assert report_last is not None
    n_expected = scenario.n_dirs * scenario.n_files_per_dir
    if report_last.cnt_files != n_expected:
        raise RuntimeError(
            f"Unexpected cnt_files={report_last.cnt_files} expected={n_expected}"
        )

    return SpecCopyBenchmarkStats(
        api=api,
        scenario=scenario,
        repeats=repeat,
        times_seconds=l_times,
        mean_seconds=sum(l_times) / len(l_times),
        min_seconds=min(l_times),
        max_seconds=max(l_times),
        cnt_files=report_last.cnt_files,
        cnt_dirs=report_last.cnt_dirs,
    )


def render_md(payload: dict[str, Any]) -> str:
    l_lines = [
        "# copykit Benchmark Record",
        "",
        f"- Timestamp (UTC): `{payload['timestamp_utc']}`",
        f"- Command: `{payload['command']}`",
        f"- Platform: `{payload['platform']}`",
        f"- Python: `{payload['python_version']}`",
        "",
        "| api | mean_s | min_s | max_s | files | dirs |",
        "| --- | ---: | ---: | ---: | ---: | ---: |",
    ]
    for item in payload["results"]:
        l_lines.append(
            f"| {item['api']} | {item['mean_seconds']:.6f} | "
            f"{item['min_seconds']:.6f} | {item['max_seconds']:.6f} | "
            f"{item['cnt_files']} | {item['cnt_dirs']} |"
        )

    res_sync = next((x for x in payload["results"] if x["api"] == "sync"), None)
    res_async = next((x for x in payload["results"] if x["api"] == "async"), None)
    if res_sync and res_async:
        delta_pct = (res_async["mean_seconds"] / res_sync["mean_seconds"] - 1.0) * 100.0
        l_lines.extend(
            [
                "",
                f"- Async vs sync (mean): `{delta_pct:+.2f}%` "
                "(positive means the suspending API is slower).",
            ]
        )

    return "\n".join(l_lines) + "\n"


def main() -> None:
    args = parse_args()
    if args.repeat < 1:
        raise ValueError("--repeat must be >= 1")

    scenario = build_scenario(args.scenario)
    args.out_dir.mkdir(parents=True, exist_ok=True)

    l_results = []
    with tempfile.TemporaryDirectory(prefix="copykit_bench_") as dir_tmp:
        path_src = Path(dir_tmp) / "src"
        path_dst = Path(dir_tmp) / "dst"
        prepare_source_tree(path_src, scenario)
        for api in ("sync", "async"):
            l_results.append(
                benchmark_api(
                    api=api,
                    path_src=path_src,
                    path_dst=path_dst,
                    scenario=scenario,
                    repeat=args.repeat,
                )
            )

    timestamp = datetime.now(timezone.utc).isoformat()
    timestamp_compact = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    cmd = " ".join(["scripts/benchmark_copy.py", *sys.argv[1:]])

    payload = {
        "timestamp_utc": timestamp,
        "command": cmd,
        "platform": platform.platform(),
        "python_version": sys.version.split()[0],
        "scenario": asdict(scenario),
        "results": [asdict(item) for item in l_results],
    }

    path_file_json = args.out_dir / f"copy_{timestamp_compact}.json"
    path_file_md = args.out_dir / f"copy_{timestamp_compact}.md"
    path_file_json.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    path_file_md.write_text(render_md(payload), encoding="utf-8")

    print(path_file_json)
    print(path_file_md)


if __name__ == "__main__":
    main()
