"""CLI entrypoints for the match kinematics project."""

from __future__ import annotations

import argparse
import json
import logging

from .config import default_estimator_settings, resolve_data_file, resolve_output_dir
from .estimator import MotionEstimator
from .pipeline import load_samples, replay_samples, summarize_session
from .results import write_session_results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Replay a GPS sample CSV and summarize motion metrics.")
    parser.add_argument(
        "--input",
        default=None,
        help="Path to a sample CSV (default: auto-resolve from project config).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for snapshots.csv and results.json (default: project config).",
    )
    parser.add_argument(
        "--write",
        action="store_true",
        help="Write snapshots.csv and results.json in addition to printing the summary.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    input_path = resolve_data_file(args.input)
    settings = default_estimator_settings()
    estimator = MotionEstimator(settings)

    frame = replay_samples(load_samples(input_path), estimator)
    summary = summarize_session(frame)
    summary["input_path"] = str(input_path)

    if args.write:
        output_dir = resolve_output_dir(args.output_dir)
        contract_path = write_session_results(
            frame,
            summary,
            input_path=input_path,
            output_dir=output_dir,
            settings=settings,
            diagnostics=estimator.diagnostics(),
        )
        summary["results_path"] = str(contract_path)

    print(json.dumps(summary, indent=2))


if __name__ == "__main__":
    main()
