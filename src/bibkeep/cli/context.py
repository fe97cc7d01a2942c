from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console

from bibkeep.application.services.bibliography_service import BibliographyService
from bibkeep.core.config import Settings


@dataclass(slots=True)
class CLIContext:
    settings: Settings
    console: Console
    service: BibliographyService
