from __future__ import annotations

import argparse
from pathlib import Path
import sys

from knowledge_scout.config import get_settings
from knowledge_scout.db import Base, get_engine
from knowledge_scout.logging_setup import setup_logging
from knowledge_scout.services.knowledge import build_services, ingest_directory


def _build_parser() -> argparse.ArgumentParser:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="scout-ingest",
        description="Ingest .txt/.md files into the KnowledgeScout document store",
    )
    parser.add_argument(
        "--source-dir",
        default=settings.source_dir,
        help="Source directory containing .txt/.md documents",
    )
    parser.add_argument(
        "--owner-id",
        required=True,
        help="Identity recorded as the owner of every ingested document",
    )
    parser.add_argument(
        "--private",
        action="store_true",
        help="Store documents as private; each one gets its own share token",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)

    try:
        engine = get_engine()
        if settings.auto_create_schema:
            Base.metadata.create_all(bind=engine)
        services = build_services(engine, settings)
        summary = ingest_directory(
            services.store,
            source_dir=Path(args.source_dir),
            owner_id=args.owner_id,
            is_private=args.private,
        )
    except Exception as exc:
        print(f"[scout-ingest] failed: {exc}", file=sys.stderr, flush=True)
        raise SystemExit(1) from exc

    print(
        "[scout-ingest] completed "
        f"documents={summary.document_count} "
        f"pages={summary.page_count} "
        f"source_dir={summary.source_dir}",
        flush=True,
    )


if __name__ == "__main__":
    main()
