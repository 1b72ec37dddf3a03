"""Locate, read and parse introspection documents from a directory.

The XML directory is chosen in this order:

1. ``config.xml_path`` (the ``LOCKSTEP_XML_PATH`` environment variable),
2. an explicit path passed by the caller,
3. the first existing conventional directory (``xml/``, ``XML/``) under the
   base directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from lockstep.core.config import LockstepConfig, get_config
from lockstep.core.errors import DirectoryUnreadableError
from lockstep.core.models import InterfaceDocument
from lockstep.introspection.parser import parse_document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentSource:
    """Raw text of one introspection document and its identity."""

    identity: str
    text: str


def resolve_xml_path(
    explicit: Path | str | None = None,
    *,
    config: LockstepConfig | None = None,
    base_dir: Path | None = None,
) -> Path:
    """Choose the XML directory to read.

    Args:
        explicit: Path given by the caller (overridden by ``config.xml_path``).
        config: Configuration; defaults to the cached global config.
        base_dir: Directory the conventional locations are relative to;
            defaults to the current working directory.

    Returns:
        The directory to read.

    Raises:
        DirectoryUnreadableError: If no path was given and no conventional
            directory exists.
    """
    config = config or get_config()

    if config.xml_path is not None:
        logger.debug(f"Using XML path from configuration: {config.xml_path}")
        return Path(config.xml_path)

    if explicit is not None:
        return Path(explicit)

    base = base_dir or Path.cwd()
    candidates = [base / name for name in config.default_xml_dirs]
    for candidate in candidates:
        if candidate.is_dir():
            logger.debug(f"Using conventional XML directory: {candidate}")
            return candidate

    raise DirectoryUnreadableError(
        None,
        "no XML path provided and no default XML directory found in "
        + " or ".join(f'"{c}"' for c in candidates),
    )


def read_sources(
    directory: Path, *, config: LockstepConfig | None = None
) -> list[DocumentSource]:
    """Read every introspection document in ``directory``, sorted by name.

    Raises:
        DirectoryUnreadableError: If the directory cannot be enumerated or a
            file cannot be read.
    """
    config = config or get_config()
    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        raise DirectoryUnreadableError(directory, str(e)) from e

    sources = []
    for path in entries:
        if not path.is_file():
            continue
        if path.suffix.lower() != config.xml_suffix.lower():
            logger.debug(f"Skipping non-XML file: {path}")
            continue
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DirectoryUnreadableError(directory, f"failed to read {path}: {e}") from e
        logger.debug(f"Read introspection document: {path}")
        sources.append(DocumentSource(identity=str(path), text=text))

    if not sources:
        logger.warning(f"No '{config.xml_suffix}' files found in {directory}")
    return sources


def parse_sources(sources: list[DocumentSource]) -> list[InterfaceDocument]:
    """Parse already-read sources, preserving their order.

    Raises:
        DocumentParseError: Naming the first malformed document.
    """
    return [parse_document(source.text, source.identity) for source in sources]


def load_documents(
    path: Path | str | None = None,
    *,
    config: LockstepConfig | None = None,
    base_dir: Path | None = None,
) -> list[InterfaceDocument]:
    """Resolve the XML directory, then read and parse every document in it."""
    config = config or get_config()
    directory = resolve_xml_path(path, config=config, base_dir=base_dir)
    documents = parse_sources(read_sources(directory, config=config))
    logger.debug(f"Loaded {len(documents)} document(s) from {directory}")
    return documents
