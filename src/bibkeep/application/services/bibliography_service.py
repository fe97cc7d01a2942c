from __future__ import annotations

import logging
from pathlib import Path

from bibkeep.core.config import Settings
from bibkeep.core.errors import DestinationExistsError, SourceNotFoundError
from bibkeep.core.files import write_text_atomic
from bibkeep.domain.models.bibliography import BibDatabase
from bibkeep.infrastructure.exporters.bibtex_exporter import dumps_bibtex
from bibkeep.infrastructure.parsers.bibtex_parser import parse_bibtex, try_parse_bibtex

logger = logging.getLogger(__name__)


class BibliographyService:
    """Load and save BibTeX files around the in-memory parser and exporter."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    def parse(self, text: str, *, debug: bool = False) -> BibDatabase:
        return parse_bibtex(text, debug=debug)

    def try_parse(self, text: str) -> BibDatabase | None:
        return try_parse_bibtex(text)

    def load(self, bib_path: Path, *, debug: bool = False) -> BibDatabase:
        path = bib_path.expanduser().resolve()
        if not path.exists() or not path.is_file():
            raise SourceNotFoundError(f"BibTeX file not found: {path}")

        raw = path.read_text(encoding=self.settings.encoding)
        db = parse_bibtex(raw, debug=debug)
        logger.info(
            "Loaded %s: %d preamble block(s), %d string(s), %d entr(y/ies)",
            path,
            len(db.preamble),
            len(db.strings),
            len(db.entries),
        )
        return db

    def dumps(self, db: BibDatabase, *, opening: str | None = None) -> str:
        return dumps_bibtex(db, opening=opening or self.settings.opening)

    def save(
        self,
        bib_path: Path,
        db: BibDatabase,
        *,
        overwrite: bool = False,
        opening: str | None = None,
    ) -> Path:
        path = bib_path.expanduser()
        if not overwrite and path.exists():
            raise DestinationExistsError(f"file {str(path)!r} already exists")

        text = self.dumps(db, opening=opening)
        write_text_atomic(path, text, encoding=self.settings.encoding)
        logger.info("Saved %d entr(y/ies) to %s", len(db.entries), path)
        return path

    def save_overwrite(self, bib_path: Path, db: BibDatabase, *, opening: str | None = None) -> Path:
        return self.save(bib_path, db, overwrite=True, opening=opening)
