"""
CLI usage:
python -m scripts.import_percentiles <test_id> <path_to_csv> <max_marks>
File format: one "marks,percentile" pair per line, optional header row.
"""

import sys
from typing import List, Optional

import gearx.models  # noqa: F401 - register ORM tables on Base.metadata
from gearx.core.errors import DomainError, PercentileParseError
from gearx.db.database import Base, engine, transactional_session
from gearx.services.percentiles import import_percentile_map


USAGE = "Usage: python -m scripts.import_percentiles <test_id> <csv_path> <max_marks>"


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 3:
        print(USAGE)
        return 1
    test_id, path, max_marks_token = args
    try:
        max_marks = int(max_marks_token)
    except ValueError:
        print("max_marks must be an integer")
        return 1
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            content = f.read()
    except OSError as exc:
        print(f"Cannot read {path}: {exc.strerror}")
        return 1

    Base.metadata.create_all(bind=engine)
    try:
        with transactional_session() as db:
            summary = import_percentile_map(db, test_id, content, max_marks, actor="cli")
    except PercentileParseError as exc:
        for line in exc.detail.get("errors", []):
            print(line)
        return 2
    except DomainError as exc:
        print(exc.message)
        return 1

    for line in summary.errors:
        print(f"warning: {line}")
    print(
        f"Imported percentile map for test_id={summary.test_id} "
        f"max_marks={summary.max_marks} anchors={summary.anchors} slots={summary.slots}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
