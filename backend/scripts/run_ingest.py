"""Run a brand ingest from the command line.

Usage:
    python backend/scripts/run_ingest.py mcdonalds
    python backend/scripts/run_ingest.py --all
"""
import argparse
import sys

from sqlmodel import Session

from burgerlab.core.database import engine, init_db
from burgerlab.core.logs import configure_logging
from burgerlab.ingest.driver import IngestError, run_ingest
from burgerlab.ingest.profiles import PROFILE_CLASSES
from burgerlab.seed import seed_brands


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Scrape and reconcile brand menus.")
    parser.add_argument("slugs", nargs="*", help="brand slugs, e.g. mcdonalds burgerking")
    parser.add_argument("--all", action="store_true", help="run every registered brand")
    parser.add_argument("--seed", action="store_true", help="seed missing brands first")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    slugs = [cls.slug for cls in PROFILE_CLASSES] if args.all else args.slugs
    if not slugs:
        parser.error("give at least one brand slug or --all")

    configure_logging(args.log_level)
    init_db()
    exit_code = 0
    with Session(engine) as s:
        if args.seed:
            seed_brands(s)
        for slug in slugs:
            try:
                summary = run_ingest(s, slug)
            except IngestError as exc:
                print(f"[{slug}] {exc}")
                exit_code = 1
                continue
            print(
                f"[{slug}] total={summary.total} created={summary.created} "
                f"updated={summary.updated} errors={summary.errors}"
            )
            for message in summary.error_details[:10]:
                print(f"    - {message}")
            if not summary.success:
                exit_code = exit_code or 2
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
