from __future__ import annotations
import argparse, json, sys
from . import config as CFG
from .engine import Engine
from .errors import MarkovError


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="markov", description="Markov chain text model (SQLite-backed)")
    p.add_argument("--db", default=CFG.DEFAULT_DSN,
                   help="Store DSN: sqlite:///path, sqlite://:memory: or memory://")
    p.add_argument("--verbose", action="store_true")
    sub = p.add_subparsers(dest="cmd", required=True)

    ing = sub.add_parser("ingest", help="Feed text files into the chain")
    ing.add_argument("paths", nargs="+", help="Files, folders of .txt, or - for stdin")
    ing.add_argument("--order", type=int, default=CFG.DEFAULT_ORDER, help="Words per prefix")
    ing.add_argument("--author", default="",
                     help="Attribute all text to AUTHOR (default: first word of each line is the author)")
    ing.add_argument("--timeout", type=float, default=None, help="Stop after this many seconds")
    ing.add_argument("--per-line", action="store_true",
                     help="Restart the window on every line (no prefix crosses a line break)")
    ing.add_argument("--workers", type=int, default=1, help="Ingest input files in parallel")

    gen = sub.add_parser("generate", help="Generate text by weighted random walk")
    gen.add_argument("words", nargs="*", help="Seed word(s); the first one picks the start prefix")
    gen.add_argument("--seed", type=int, default=None, help="Random seed (reproducible output)")
    gen.add_argument("--max-words", type=int, default=None, help="Cap on generated words")

    srch = sub.add_parser("search", help="List prefixes containing a word")
    srch.add_argument("word")
    srch.add_argument("-n", type=int, default=CFG.TOP_N_PREFIXES, help="Max prefixes to list")
    srch.add_argument("--json", action="store_true", help="Emit JSON rows")

    sub.add_parser("stats", help="Show prefix / suffix totals")
    return p


def main(argv: list[str] | None = None) -> int:
    p = _build_parser()
    args = p.parse_args(argv)

    eng = Engine()
    try:
        eng.open(args.db, verbose=args.verbose)

        if args.cmd == "ingest":
            st = eng.ingest_paths(
                args.paths, order=args.order, author=args.author,
                timeout=args.timeout, per_line=args.per_line, workers=args.workers,
            )
            print(f"lines={st.lines} words={st.words} observations={st.observations}")

        elif args.cmd == "generate":
            eng.generate(args.words, sys.stdout, seed=args.seed, max_words=args.max_words)
            print()

        elif args.cmd == "search":
            rows = eng.search(args.word, limit=args.n)
            if args.json:
                print(json.dumps([r.to_dict() for r in rows], ensure_ascii=False, indent=2))
            else:
                print("#     Id  Author           Prefix")
                for i, r in enumerate(rows, 1):
                    print(f"{i:<3} {r.id:>5}  {r.author:<16} {r.tuple}")

        elif args.cmd == "stats":
            s = eng.stats()
            print(f"prefixes={s['prefixes']} suffixes={s['suffixes']}")

        return 0
    except (MarkovError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        eng.shutdown()


if __name__ == "__main__":
    raise SystemExit(main())
