"""CLI for running offline elevator dispatch scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional

from simulation import (
    BuildingConfig,
    DispatchConfig,
    ElevatorConstraints,
    Request,
    Simulation,
    build_dispatcher,
    format_snapshot,
)

logger = logging.getLogger("run_scenario")


def build_simulation(config: Dict) -> Simulation:
    building = BuildingConfig(**config.get("building", {}))
    constraints = ElevatorConstraints(**config.get("constraints", {}))
    scheduler_cfg = config.get("scheduler", {})
    dispatch = DispatchConfig(
        batch_size=scheduler_cfg.get("batch_size", DispatchConfig.batch_size),
        scheduler_name=scheduler_cfg.get("name", "cost"),
        scheduler_options=scheduler_cfg.get("options", {}),
    )
    dispatcher = build_dispatcher(building, constraints, dispatch)

    scripted = [
        Request(r["origin"], r["destination"], r.get("tick", 0))
        for r in config.get("requests", [])
    ]

    return Simulation(
        dispatcher=dispatcher,
        scripted_requests=scripted,
        arrival_rate_per_floor=config.get("arrival_rate_per_floor", 0.0),
        random_seed=config.get("random_seed"),
        snapshot_interval=config.get("print_interval", 2),
    )


def run_simulation(simulation: Simulation, config: Dict, echo: bool = True) -> List[Dict]:
    # Ticks 0..duration inclusive.
    duration = config.get("duration", 120)
    metrics_interval = config.get("metrics_interval", 10)
    snapshots: List[Dict] = []

    if echo:
        simulation.on_event("snapshot", lambda snapshot: print(format_snapshot(snapshot), end=""))

    for _ in range(duration + 1):
        time_step = simulation.current_time
        simulation.step()
        if time_step % metrics_interval == 0:
            snapshots.append(asdict(simulation.dispatcher.metrics_snapshot(time_step)))
    return snapshots


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write metrics snapshots as JSON",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = json.loads(args.config.read_text())
    simulation = build_simulation(config)
    logger.info("running scenario %s", config.get("name", args.config.stem))
    snapshots = run_simulation(simulation, config)
    print("Simulation complete.")

    final_metrics = asdict(simulation.metrics_snapshot())
    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "duration": config.get("duration", 120),
        "scheduler": simulation.dispatcher.scheduler_name,
        "final_metrics": final_metrics,
        "metrics_over_time": snapshots,
    }
    save_results(args.output, results)
    logger.info("scenario finished at tick %d", simulation.current_time)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(f"Scheduler: {results['scheduler']}")
    print(f"Duration: {results['duration']} ticks")
    print("Final metrics:")
    for key, value in final_metrics.items():
        print(f"  {key}: {value}")
    if args.output:
        print(f"Saved metrics to {args.output}")


if __name__ == "__main__":
    main()
