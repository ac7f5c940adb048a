#!/usr/bin/env python3
"""
Load the sample course fixture into Elasticsearch without starting the API.
Use this after changing the fixture or when the index is empty or broken.

If you get 503 / no_shard_available from Elasticsearch, drop and recreate the index first:
  python scripts/load_courses.py --reset-index

  python scripts/load_courses.py
  python scripts/load_courses.py --file path/to/courses.json

Reads ELASTICSEARCH_URL from .env (default http://localhost:9200).
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from elasticsearch.helpers import bulk

from coursesearch.config import get_settings
from coursesearch.search.elasticsearch_client import (
    ensure_courses_index_sync,
    reset_courses_index_sync,
    sync_es_client,
)
from coursesearch.services.course_loader import read_course_fixture


def main():
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Bulk-load sample courses into Elasticsearch")
    ap.add_argument("--file", type=Path, default=settings.sample_courses_path, help="JSON array of course records")
    ap.add_argument("--reset-index", action="store_true", help="Delete and recreate the courses index first")
    args = ap.parse_args()

    courses = read_course_fixture(args.file)
    if not courses:
        print(f"No courses in {args.file}.")
        return

    es = sync_es_client()
    if args.reset_index:
        reset_courses_index_sync(es)
        print(f"Recreated index '{settings.courses_index}'.")
    elif ensure_courses_index_sync(es):
        print(f"Created index '{settings.courses_index}'.")

    actions = [c.to_bulk_action(settings.courses_index) for c in courses]
    success, errors = bulk(es, actions, refresh="wait_for", raise_on_error=False)
    print(f"Indexed {success} of {len(courses)} courses into '{settings.courses_index}'.")
    if errors:
        print(f"Errors ({len(errors)}):")
        for e in errors[:15]:
            print("  ", e)
        sys.exit(1)
    print(f"Check with: curl -s 'http://localhost:9200/{settings.courses_index}/_count?pretty'")


if __name__ == "__main__":
    main()
