# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Journey CLI — offline analysis and the MCP server.

Usage:
    journey analyze --file reflections.jsonl            Text summary
    journey analyze --file r.jsonl --theme love --json  Full snapshot as JSON
    journey analyze --file r.jsonl --policy depth       Depth-weighted growth
    journey serve                                       Start MCP server (stdio)
    journey --data-dir PATH                             Override data directory
    journey --version
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import List, Optional


def _analyze(file: Path, theme: Optional[str], policy: str, as_json: bool) -> int:
    """Analyze a JSONL export without any reflection store."""
    from engine.lexicon import node_name
    from engine.pipeline import analyze_journey, parse_reflections
    from engine.schemas import load_jsonl

    if not file.exists():
        print(f"No such file: {file}", file=sys.stderr)
        return 1

    # a valid JSON line need not be an object; those are skipped like malformed rows
    rows = [r for r in load_jsonl(file) if isinstance(r, dict)]
    # exports are usually oldest first; the pipeline expects newest first
    rows.sort(key=lambda r: str(r.get("created_at") or r.get("createdAt") or ""), reverse=True)
    reflections = parse_reflections(rows)
    snapshot = analyze_journey(reflections, theme=theme, policy=policy)

    if as_json:
        print(json.dumps(snapshot.to_dict(), indent=2))
        return 0

    print(f"Reflections:  {len(reflections)}")
    print(f"Growth:       {snapshot.growth_score:.0f}/100")
    nodes = ", ".join(node_name(n) for n in snapshot.activated_nodes) or "none"
    print(f"Nodes:        {nodes}")
    print(f"Emotions:     {', '.join(snapshot.dominant_emotions) or 'none'}")
    for text in snapshot.insights:
        print(f"  - {text}")
    if snapshot.resonance_edges:
        print("Resonance:")
        for e in snapshot.resonance_edges:
            print(f"  {node_name(e.a)} <-> {node_name(e.b)}  {e.intensity:.2f}")
    print("Recommendations:")
    for rec in snapshot.emotional_recommendations:
        print(f"  {rec.title}: {rec.description}")
    return 0


def _serve(data_dir: Path) -> None:
    """Start the MCP server over stdio."""
    from core.paths import configure

    paths = configure(data_dir)
    paths.ensure_dirs()

    from journey_mcp.server import main as serve_main
    serve_main()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        prog="journey",
        description="Journey — affective state and node resonance from reflections",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Override data directory (default: $JOURNEY_DATA_DIR or ~/.journey/)",
    )
    parser.add_argument(
        "--version", action="store_true",
        help="Show version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    analyze_parser = sub.add_parser("analyze", help="Analyze a JSONL file of reflections")
    analyze_parser.add_argument("--file", "-f", type=Path, required=True,
                                help="JSONL file, one reflection per line")
    analyze_parser.add_argument("--theme", default=None,
                                help="Selected theme (love, peace, power, wisdom, ...)")
    analyze_parser.add_argument("--policy", choices=["baseline", "depth"], default="baseline",
                                help="Growth policy (default: baseline)")
    analyze_parser.add_argument("--json", action="store_true", dest="as_json",
                                help="Print the full snapshot as JSON")

    sub.add_parser("serve", help="Start MCP server (stdio)")

    args = parser.parse_args(argv)

    if args.version:
        from engine import __version__
        print(f"journey-core {__version__}")
        sys.exit(0)

    # Resolve data dir: flag -> env -> default
    if args.data_dir:
        data_dir = args.data_dir.expanduser().resolve()
    else:
        env = os.environ.get("JOURNEY_DATA_DIR")
        data_dir = Path(env).expanduser().resolve() if env else Path.home() / ".journey"

    if args.command == "analyze":
        sys.exit(_analyze(args.file, args.theme, args.policy, args.as_json))
    elif args.command == "serve":
        _serve(data_dir)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
