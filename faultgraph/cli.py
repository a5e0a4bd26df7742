"""
Fault Graph CLI

Inspect a fault hierarchy and run the two-phase layout.

Commands:
    info    - Model summary and function legend
    core    - Core membership for the global forest or a local root
    layout  - Settle the hierarchy, add interface edges, export positions

Usage:
    faultgraph info graph.json
    faultgraph core graph.json --root 4 --depth 2
    faultgraph layout graph.yaml --seed 7 --html out/graph.html --png out/graph.png
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config.settings import LayoutSettings
from .core.graph_model import GraphModel
from .core.loader import load_raw_graph
from .layout.controller import LayoutPhaseController
from .layout.cores import CoreExtractor
from .simulation.spring import SpringSimulator

logger = logging.getLogger("faultgraph")


# ---------------------------------------------------------------------------
# CLI Argument Parsing
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per task."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", "-c", metavar="FILE", help="Layout settings (YAML or JSON)")
    common.add_argument("--output", "-o", metavar="FILE", help="Write JSON result to file")
    common.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    common.add_argument("--quiet", "-q", action="store_true", help="Only log warnings and errors")

    parser = argparse.ArgumentParser(
        prog="faultgraph",
        description="Two-phase force layout for fault hierarchies.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  %(prog)s info graph.json                    Summary and legend
  %(prog)s core graph.json --root 4           Local core around node 4
  %(prog)s layout graph.json --html g.html    Lay out and render
""",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    info = subparsers.add_parser("info", parents=[common], help="Model summary and legend")
    info.add_argument("graph", help="Graph document (.json, .yaml, .yml)")

    core = subparsers.add_parser("core", parents=[common], help="Core membership")
    core.add_argument("graph", help="Graph document (.json, .yaml, .yml)")
    core.add_argument("--root", "-r", type=int, help="Local root id (default: global forest)")
    core.add_argument("--depth", "-d", type=int, help="Local depth (clamped to the configured range)")

    layout = subparsers.add_parser("layout", parents=[common], help="Run both layout phases")
    layout.add_argument("graph", help="Graph document (.json, .yaml, .yml)")
    layout.add_argument("--root", "-r", type=int, help="Local root id (default: global forest)")
    layout.add_argument("--depth", "-d", type=int, help="Local depth (clamped to the configured range)")
    layout.add_argument("--seed", "-s", type=int, help="Random seed for jitter and the simulator")
    layout.add_argument("--html", metavar="FILE", help="Render the scene as interactive HTML")
    layout.add_argument("--png", metavar="FILE", help="Render the scene as a static image")

    return parser


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def load_settings(args: argparse.Namespace) -> LayoutSettings:
    if args.config:
        return LayoutSettings.from_file(args.config)
    return LayoutSettings.from_env()


def load_model(path: str) -> GraphModel:
    return GraphModel.from_raw(load_raw_graph(path))


def emit(result: Dict[str, Any], output: Optional[str]) -> None:
    """Print the result or write it to a JSON file."""
    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(result, f, indent=2, default=str)
        logger.info(f"Results exported to {output_path}")
    else:
        print(json.dumps(result, indent=2, default=str))


# ---------------------------------------------------------------------------
# Command Handlers
# ---------------------------------------------------------------------------

def handle_info(args: argparse.Namespace) -> int:
    model = load_model(args.graph)
    emit({
        "summary": model.summary(),
        "legend": [entry.to_dict() for entry in model.legend()],
    }, args.output)
    return 0


def handle_core(args: argparse.Namespace) -> int:
    settings = load_settings(args)
    model = load_model(args.graph)
    extractor = CoreExtractor(model)

    if args.root is None:
        core = extractor.forest_core(model.function_roots)
    else:
        depth = settings.local.clamp_depth(
            args.depth if args.depth is not None else settings.local.visible_depth
        )
        core = extractor.bi_local_core(args.root, depth)

    result = core.to_dict()
    result["root"] = args.root
    emit(result, args.output)
    return 0


def handle_layout(args: argparse.Namespace) -> int:
    settings = load_settings(args)
    if args.seed is not None:
        settings.seed = args.seed
    model = load_model(args.graph)

    simulator = SpringSimulator(
        width=settings.view.width,
        height=settings.view.height,
        seed=settings.seed,
    )
    controller = LayoutPhaseController(model, simulator=simulator, settings=settings)
    if args.root is not None:
        controller.select_root(args.root, depth=args.depth)

    # Settle the tree; the engine stop moves the scene to the interface phase
    simulator.run()
    simulator.run()

    scene = controller.current_core()
    result = scene.to_dict()
    result["fixed"] = len(controller.fixed)
    result["snapshot"] = controller.snapshot is not None

    if args.html:
        from .visualization.html import render_html
        render_html(controller, args.html, title=Path(args.graph).stem)
    if args.png:
        from .visualization.static import render_png
        render_png(controller, args.png, title=Path(args.graph).stem)

    emit(result, args.output)
    return 0


HANDLERS = {
    "info": handle_info,
    "core": handle_core,
    "layout": handle_layout,
}


# ---------------------------------------------------------------------------
# Entry Point
# ---------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    log_level = (
        logging.DEBUG if args.verbose
        else logging.WARNING if args.quiet
        else logging.INFO
    )
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    try:
        return HANDLERS[args.command](args)
    except (ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if args.verbose:
            logger.exception("Command failed")
        return 1
    except Exception as exc:
        logger.exception("Unexpected failure")
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
