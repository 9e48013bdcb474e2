"""CLI printing the notes from the configured backend, grouped by day"""

import argparse
import sys

from loguru import logger

from truthnotes.config import settings
from truthnotes.domain.result import Err
from truthnotes.grouping import filter_groups, format_display_date, format_time, group_by_day
from truthnotes.store import NoteStore
from truthnotes.sync.local import LocalSyncAdapter


def main(store_path: str, query: str) -> int:
    store = NoteStore(LocalSyncAdapter(filepath=store_path))
    result = store.refresh()
    if isinstance(result, Err):
        logger.error(f"Could not load notes: {result.error}")
        return 1

    tz = settings.display_tz
    groups = filter_groups(group_by_day(store.notes, tz), query)
    if not groups:
        print("The list is empty.")
        return 0

    verifier_names = {v.id: v.name for v in store.verifiers}
    for key, notes in groups.items():
        print(format_display_date(key))
        for note in notes:
            line = f"  {format_time(note.created_at, tz)}  {note.content}"
            if note.verified_by:
                names = ", ".join(verifier_names.get(v, v) for v in note.verified_by)
                line += f"  (verified by {names})"
            print(line)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--store",
        type=str,
        required=False,
        help="Local records file",
        default=settings.local_store_path,
    )
    parser.add_argument(
        "--query", type=str, required=False, default="", help="Only show notes containing this text"
    )

    args = parser.parse_args()

    sys.exit(main(store_path=args.store, query=args.query))
