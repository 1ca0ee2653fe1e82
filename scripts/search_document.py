#!/usr/bin/env python3
"""CLI helper that runs a full-text query against a stored document."""

from __future__ import annotations

import argparse
import json
import logging

from iiif_search.config import get_settings
from iiif_search.search.service import SearchService
from iiif_search.storage import DirectoryDocumentStore, DocumentNotFoundError


def _configure_logging() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("document_id", type=int, help="Numeric id of the document directory.")
    parser.add_argument("query", help="Words to search for.")
    parser.add_argument("--data-dir", default=None, help="Directory holding the documents.")
    args = parser.parse_args(argv)

    _configure_logging()
    settings = get_settings()
    store = DirectoryDocumentStore(args.data_dir or settings.data_dir)

    try:
        document = store.get(args.document_id)
    except DocumentNotFoundError as error:
        logging.error("%s", error)
        return 1

    response = SearchService(settings).search(document, args.query)
    if response is None:
        logging.error("Search is not supported for document #%s", args.document_id)
        return 1

    print(json.dumps(response.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
