"""
Main entry point for replaying a scripted interaction against a puzzle.

Usage:
    python -m src.main puzzles/sample.yaml
    python -m src.main puzzles/sample.yaml --output results/run1.json --verbose
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from .engine import GameEngine, ManualClock, PuzzleConfig, ScriptedCapture, load_config
from .utils.board_visualizer import render_board, render_overlap, render_pool
from .utils.logger import configure_logging


def replay(config: PuzzleConfig, verbose: bool = False) -> Dict[str, Any]:
    """
    Run the config's script against a fresh engine.

    Script steps are actions, plus two extras:
    - {"action": "wait", "ms": 600} advances the virtual clock
    - "captureFails": true on a dragStart makes its pointer capture fail

    Returns:
        Result dictionary with the final snapshot and replay statistics
    """
    clock = ManualClock()
    capture = ScriptedCapture()
    engine = GameEngine.from_config(config, scheduler=clock, capture=capture)
    steps: List[str] = []

    for i, step in enumerate(config.script, start=1):
        step = dict(step)
        if step.get("action") == "wait":
            fired = clock.advance(float(step.get("ms", 0)) / 1000)
            steps.append(f"wait {step.get('ms', 0)}ms ({fired} timer(s) fired)")
        else:
            capture.fail_next = bool(step.pop("captureFails", False))
            engine.dispatch(step)
            steps.append(step["action"])
        if verbose:
            print(f"{i:>3}. {steps[-1]:<40} phase={engine.state.phase.value}")

    engine.close()
    state = engine.state
    return {
        "snapshot": engine.snapshot(),
        "board": render_board(state.pieces, state.grid_size),
        "overlap": render_overlap(engine.overlap_grid()),
        "pool": render_pool(state.pool_pieces),
        "steps": steps,
        "rejected_actions": engine.rejected,
        "capture_history": capture.history,
    }


def main():
    parser = argparse.ArgumentParser(
        description="Replay a scripted drag interaction against a puzzle",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example puzzle.yaml:
  grid_size: 5
  board: {left: 0, top: 0, width: 500, height: 500}
  pool: {left: 0, top: 520, width: 500, height: 300}
  pieces:
    - id: cat
      letters: ["CAT"]
  solution:
    words: ["CAT"]
  script:
    - {action: dragStart, pieceID: cat, pointerID: 1,
       pointer: {x: 10, y: 530}, pointerOffset: {x: 10, y: 10}}
    - {action: dragMove, pointer: {x: 110, y: 210}}
    - {action: dragEnd}
        """
    )
    parser.add_argument(
        "config",
        help="Path to YAML puzzle file"
    )
    parser.add_argument(
        "--output", "-o",
        help="Path to save results JSON (default: results/<timestamp>.json)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print each step and debug logging"
    )

    args = parser.parse_args()
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    if args.output:
        output_path = Path(args.output)
    else:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = Path("results") / f"replay_{timestamp}.json"

    try:
        result = replay(config, verbose=args.verbose)
    except ValueError as e:
        print(f"Error during replay: {e}", file=sys.stderr)
        sys.exit(1)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(result, f, indent=2, default=str)

    snapshot = result["snapshot"]
    print()
    print("=== Replay Summary ===")
    print(result["board"])
    if result["pool"]:
        print()
        print("Pool:")
        print(result["pool"])
    print()
    print(f"Steps: {len(result['steps'])} ({result['rejected_actions']} rejected)")
    print(f"All pieces used: {snapshot['allPiecesAreUsed']}")
    print(f"Solved: {snapshot['gameIsSolved']}")
    print(f"Results saved to: {output_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
