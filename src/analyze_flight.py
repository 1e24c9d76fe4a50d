"""Analyze a recorded flight and generate diagnostic figures."""
from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path
from typing import Dict, List

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt


TIMESERIES_FILENAME = "timeseries.csv"
EVENTS_FILENAME = "events.csv"
META_FILENAME = "meta.json"
FIGS_SUBDIR = "figs"
TEXT_COLUMNS = ("mode", "target")
FOCUS_MODE = "Focus"


def load_timeseries(path: Path) -> Dict[str, np.ndarray]:
    with path.open("r", newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        columns: Dict[str, list] = {name: [] for name in reader.fieldnames or []}
        for row in reader:
            for key, value in row.items():
                if key is None:
                    continue
                columns.setdefault(key, []).append(value if key in TEXT_COLUMNS else float(value))
    return {
        key: np.asarray(values, dtype=object if key in TEXT_COLUMNS else float)
        for key, values in columns.items()
    }


def load_events(path: Path) -> List[dict]:
    with path.open("r", newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        events: List[dict] = []
        for row in reader:
            if not row:
                continue
            event = {"t": float(row["t"]), "type": row["type"], "target": row.get("target", "")}
            details_raw = row.get("details", "")
            if details_raw:
                try:
                    event["details"] = json.loads(details_raw)
                except json.JSONDecodeError:
                    event["details"] = details_raw
            events.append(event)
    return events


def ensure_fig_dir(run_dir: Path) -> Path:
    fig_dir = run_dir / FIGS_SUBDIR
    fig_dir.mkdir(parents=True, exist_ok=True)
    return fig_dir


def path_length(ts: Dict[str, np.ndarray]) -> float:
    if ts["x"].size < 2:
        return 0.0
    points = np.column_stack([ts["x"], ts["y"], ts["z"]])
    return float(np.linalg.norm(np.diff(points, axis=0), axis=1).sum())


def focus_fraction(ts: Dict[str, np.ndarray]) -> float:
    modes = ts.get("mode")
    if modes is None or modes.size == 0:
        return 0.0
    return float(np.count_nonzero(modes == FOCUS_MODE)) / modes.size


def summarize_events(events: List[dict]) -> Dict[str, int]:
    summary: Dict[str, int] = {"focus": 0, "release": 0, "lock": 0, "unlock": 0, "lock_failed": 0}
    for event in events:
        if event["type"] in summary:
            summary[event["type"]] += 1
    return summary


def focused_targets(events: List[dict]) -> List[str]:
    return [event["target"] for event in events if event["type"] == "focus" and event["target"]]


def plot_path(fig_dir: Path, ts: Dict[str, np.ndarray]) -> None:
    fig, ax = plt.subplots(figsize=(6, 6))
    focus_mask = ts["mode"] == FOCUS_MODE
    ax.plot(ts["x"], ts["z"], color="#6bc5c0", lw=1.0, label="Path")
    ax.scatter(ts["x"][focus_mask], ts["z"][focus_mask], s=2, color="#ffa94d", label="Focus")
    ax.scatter([0.0], [0.0], color="#ffd43b", s=60, label="Sun")
    ax.set_aspect("equal", "box")
    ax.set_xlabel("x")
    ax.set_ylabel("z")
    ax.set_title("Camera path (top-down)")
    ax.legend()
    fig.tight_layout()
    fig.savefig(fig_dir / "path_xz.png", dpi=150)
    plt.close(fig)


def plot_speed(fig_dir: Path, ts: Dict[str, np.ndarray], events: List[dict]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["t"], ts["speed"], color="#4dabf7")
    for event in events:
        if event["type"] == "focus":
            ax.axvline(event["t"], color="#d9480f", linestyle="--", alpha=0.5)
        elif event["type"] == "release":
            ax.axvline(event["t"], color="#1864ab", linestyle=":", alpha=0.5)
    ax.set_xlabel("t [s]")
    ax.set_ylabel("speed [units/s]")
    ax.set_title("Camera speed")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "speed.png", dpi=150)
    plt.close(fig)


def plot_distance(fig_dir: Path, ts: Dict[str, np.ndarray]) -> None:
    focus_mask = ts["mode"] == FOCUS_MODE
    if not np.any(focus_mask):
        return
    fig, ax = plt.subplots(figsize=(7, 4))
    distance = np.where(focus_mask, ts["distance"], np.nan)
    ax.plot(ts["t"], distance, color="#94d82d")
    ax.set_xlabel("t [s]")
    ax.set_ylabel("distance [units]")
    ax.set_title("Distance to focus target")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "distance.png", dpi=150)
    plt.close(fig)


def print_summary(run_dir: Path, meta: dict, ts: Dict[str, np.ndarray], events: List[dict]) -> None:
    duration = float(ts["t"][-1] - ts["t"][0]) if ts["t"].size else 0.0
    print(f"Flight: {run_dir.name}")
    print(f" Duration: {duration:.1f} s over {ts['t'].size} samples")
    print(f" Path length: {path_length(ts):.1f} units")
    if ts["speed"].size:
        print(f" Max speed: {float(np.max(ts['speed'])):.2f} units/s")
    print(f" Time in focus: {focus_fraction(ts) * 100:.1f}%")
    targets = focused_targets(events)
    print(f" Focus targets: {', '.join(targets) if targets else 'none'}")
    if "angular_scale" in meta:
        print(f" Orbital angular scale: {meta['angular_scale']}")
    print(
        " Events:" + ",".join(f" {etype}: {count}" for etype, count in summarize_events(events).items())
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Analyze a recorded flight and write figures.")
    parser.add_argument("run_dir", nargs="?", help="path to a specific flight directory")
    parser.add_argument("--flights-dir", type=Path, default=Path("data") / "flights")
    args = parser.parse_args()

    base_dir = args.flights_dir
    if args.run_dir:
        run_path = Path(args.run_dir)
        if not run_path.is_dir():
            run_path = base_dir / args.run_dir
    else:
        last_run_file = base_dir / "last_run.txt"
        if not last_run_file.exists():
            parser.error("No flight given and last_run.txt is missing.")
        run_path = base_dir / last_run_file.read_text(encoding="utf-8").strip()

    if not run_path.is_dir():
        parser.error(f"Flight directory not found: {run_path}")

    ts_path = run_path / TIMESERIES_FILENAME
    ev_path = run_path / EVENTS_FILENAME
    if not ts_path.exists() or not ev_path.exists():
        parser.error("Flight directory is missing timeseries.csv or events.csv.")

    meta_path = run_path / META_FILENAME
    meta: dict = {}
    if meta_path.exists():
        with meta_path.open("r", encoding="utf-8") as fh:
            meta = json.load(fh)

    ts = load_timeseries(ts_path)
    events = load_events(ev_path)
    if not ts or ts["t"].size == 0:
        parser.error("timeseries.csv is empty; nothing to analyze.")

    fig_dir = ensure_fig_dir(run_path)
    plot_path(fig_dir, ts)
    plot_speed(fig_dir, ts, events)
    plot_distance(fig_dir, ts)
    print_summary(run_path, meta, ts, events)


if __name__ == "__main__":
    main()
