"""Run the seed importer once."""

from __future__ import annotations

import argparse
import asyncio
import logging

from dotenv import load_dotenv

from seedsync.jobs.seed import RunState, build_runner


async def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--force", action="store_true", help="run even if the current version was seeded")
    parser.add_argument("--dry-run", action="store_true", help="only print the planned changes")
    parser.add_argument("--reset", action="store_true", help="clear the seeded marker and exit")
    args = parser.parse_args(argv)

    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    runner = build_runner(sink=print)
    try:
        if args.reset:
            runner.reset_markers()
            return 0
        if args.dry_run:
            await runner.dry_run()
            return 0
        result = await runner.run_if_needed(force=args.force)
    finally:
        await runner.service.store.close()
    return 1 if result.state is RunState.ERRORED else 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
