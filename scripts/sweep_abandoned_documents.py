"""Utility script deleting provider copies left behind by failed generations."""

from __future__ import annotations

import argparse
import logging

from sqlalchemy.exc import SQLAlchemyError

from app.application.use_cases.documents import sweep_abandoned_documents
from app.config import get_settings
from app.infrastructure.database import SessionLocal, initialize_database
from app.infrastructure.google_documents import GoogleDocumentProvider


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the sweep."""

    parser = argparse.ArgumentParser(
        description="Delete the provider copies of abandoned documents.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the documents whose copy would be deleted without deleting anything.",
    )
    return parser.parse_args()


def main() -> None:
    """Run the sweep using the configured provider credentials."""

    args = parse_args()
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    initialize_database()
    provider = GoogleDocumentProvider.from_service_account_file(
        settings.credentials_path,
        timeout=settings.provider_timeout_seconds,
    )

    session = SessionLocal()
    try:
        report = sweep_abandoned_documents(session, provider, dry_run=args.dry_run)
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not update document records: {exc}") from exc
    finally:
        session.close()
        provider.close()

    verb = "Would delete" if args.dry_run else "Deleted"
    print(f"{verb} {len(report.deleted)} provider copies")
    for document_id in report.deleted:
        print(f"  {document_id}")
    if report.failed:
        print(f"Failed to delete {len(report.failed)} provider copies:")
        for document_id, reason in report.failed.items():
            print(f"  {document_id}: {reason}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
