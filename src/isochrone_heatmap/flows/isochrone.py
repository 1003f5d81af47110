"""
Prefect flow that computes an isochrone heatmap and saves it to disk.

Run locally:
    python -m isochrone_heatmap.flows.isochrone

The output file is a JSON envelope ``{"meta": {...}, "data": <result>}``.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from prefect import flow, task

from isochrone_heatmap.engine import IsochroneEngine

DEFAULT_OUTPUT = Path("data/derived/isochrone.json")

# One engine (and route cache) per process
engine = IsochroneEngine()


@task(name="compute-isochrone")
def compute_isochrone(request: dict[str, Any]) -> dict[str, Any]:
    """Run the engine on a raw request body."""
    return engine.build(request).to_json_dict()


@task(name="save-isochrone")
def save_isochrone(result: dict[str, Any], output: Path = DEFAULT_OUTPUT) -> Path:
    """Write the result wrapped in a metadata envelope."""
    output.parent.mkdir(parents=True, exist_ok=True)
    envelope = {
        "meta": {
            "source": "odsay.com" if result["settings"]["transitEnabled"] else "walk-only",
            "generated_at": datetime.now(UTC).isoformat(),
        },
        "data": result,
    }
    with output.open("w") as f:
        json.dump(envelope, f, indent=2)
    return output


@flow(name="build-isochrone", log_prints=True)
def build_isochrone(request: dict[str, Any], output: Path = DEFAULT_OUTPUT) -> dict[str, Any]:
    """
    Compute and save one isochrone heatmap.

    Returns the ``stats`` block of the result.
    """
    origin = request.get("origin", {})
    print(f"Computing isochrone for ({origin.get('lat')}, {origin.get('lng')})...")
    result = compute_isochrone(request)

    stats = result["stats"]
    for note in stats["notes"]:
        print(f"Note: {note}")
    path = save_isochrone(result, output)
    print(
        f"Saved {stats['totalGridCells']} cells "
        f"({stats['validTransitSamples']}/{stats['sampledTransitCells']} transit samples) to {path}"
    )
    return stats


if __name__ == "__main__":
    summary = build_isochrone({"origin": {"lat": 37.5665, "lng": 126.978}})
    print(f"Flow complete: {summary}")
