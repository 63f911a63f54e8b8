#!/usr/bin/env python3
import argparse
import json
import logging
import sys

from static_docs_search.app import SearchEngine, build_from_content, query_text
from static_docs_search.config import load_config, with_paths
from static_docs_search.logging_utils import setup_logging

logger = logging.getLogger(__name__)


def _add_path_overrides(p: argparse.ArgumentParser):
    p.add_argument("--config", type=str, default="config.yaml")
    p.add_argument("--content-root", type=str, default=None, help="Override app.content_root")
    p.add_argument("--index-path", type=str, default=None, help="Override app.index_path")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docs-search",
        description="Build and query the static TF-IDF search index of a documentation site.",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable DEBUG logs (to stderr)."
    )
    parser.add_argument("--quiet", "-q", action="store_true", help="Reduce logs to WARN and above.")
    parser.add_argument("--log-json", action="store_true", help="Emit logs as JSON lines (stderr).")

    # -----------------------
    # build
    # -----------------------
    p_b = sub.add_parser("build", help="Walk the content root and (re)write the index")
    _add_path_overrides(p_b)

    # -----------------------
    # query
    # -----------------------
    p_q = sub.add_parser("query", help="Query the index (built on demand if missing)")
    p_q.add_argument("question", type=str, help="Query string")
    _add_path_overrides(p_q)
    p_q.add_argument("--k", type=int, default=None, help="Number of results (default retrieval.top_k)")
    p_q.add_argument(
        "--json", action="store_true", help="Print the {results: [...]} payload instead of a listing"
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose and args.quiet:
        print("Cannot use --verbose and --quiet together.", file=sys.stderr)
        return 2
    level = "DEBUG" if args.verbose else "WARNING" if args.quiet else "INFO"
    setup_logging(level=level, json_logs=args.log_json)
    logger.debug("CLI args parsed: %s", vars(args))

    try:
        cfg = with_paths(load_config(args.config), args.content_root, args.index_path)
        if args.cmd == "build":
            index = build_from_content(cfg)
            print(f"Indexed {len(index)} chunks, {len(index.matrix.vocabulary)} terms -> {cfg.app.index_path}")
            return 0

        engine = SearchEngine.bootstrap(cfg)
        if args.json:
            print(json.dumps(query_text(args.question, engine, top_k=args.k), ensure_ascii=False, indent=2))
            return 0
        hits = engine.search(args.question, top_k=args.k)
        if not hits:
            print("No results.")
        for i, h in enumerate(hits, start=1):
            ch = h.doc.chunk
            print(f"[{i}] {h.score:.4f} {h.doc.path}:{ch.start_line} | {' > '.join(ch.heading_path)}")
            print(f"    {ch.text[:200]}")
        return 0
    except Exception as e:
        logger.exception("%s failed: %s", args.cmd, e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
