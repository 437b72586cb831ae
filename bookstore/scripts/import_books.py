# Bulk import of catalog fixtures, e.g. `bookstore-import out.json`
import argparse
import json
import logging
from typing import Iterable, List

from pydantic import ValidationError
from sqlmodel import Session

from bookstore.models.book import Book
from bookstore.schemas.book_schemas import BookImport

logger = logging.getLogger(__name__)


def load_records(path: str) -> List[dict]:
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of books")
    return data


def import_books(session: Session, records: Iterable[dict]) -> int:
    """Insert every valid record; invalid ones are logged and skipped."""
    books = []
    skipped = 0

    for index, record in enumerate(records):
        try:
            data = BookImport.model_validate(record)
        except ValidationError as exc:
            skipped += 1
            logger.warning(f"Skipping record {index}: {exc.error_count()} invalid field(s)")
            continue
        books.append(Book(**data.model_dump()))

    session.add_all(books)
    session.commit()

    logger.info(f"Insert {len(books)} items, skipped {skipped}")
    return len(books)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Import books from a JSON fixture file.")
    parser.add_argument("file", nargs="?", default="out.json", help="JSON array of books")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    from bookstore.database import engine

    records = load_records(args.file)
    with Session(engine) as session:
        import_books(session, records)


if __name__ == "__main__":
    main()
