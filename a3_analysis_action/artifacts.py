"""Copying of analysis outputs into the CI-visible scratch directory."""

import logging
import shutil
from pathlib import Path

log = logging.getLogger(__name__)


def report_copy_name(run_id: str) -> str:
    """File name of the copied text report."""
    return f"a3-report-{run_id}-copy.txt"


def result_copy_name(run_id: str) -> str:
    """File name of the copied XML result document."""
    return f"a3-xml-result-{run_id}-copy.xml"


def html_copy_name(analysis_id: str, run_id: str) -> str:
    """File name of the copied HTML report of one analysis item."""
    return f"a3-{analysis_id}-{run_id}-copy.html"


def _same_location(source: Path, destination: Path) -> bool:
    source = source.resolve()
    destination = destination.resolve()
    return source == destination or source.parent == destination.parent


def copy_artifact(source: Path, destination: Path) -> Path | None:
    """Copy *source* to *destination*, best effort.

    Nothing is copied when the source already lives in the destination
    directory; the source itself is then the artifact.

    Returns:
        Path of the artifact, or None when the copy failed

    """
    if not source.is_file():
        log.error("Source file %s could not be found, skipping copy", source)
        return None

    if _same_location(source, destination):
        log.info(
            "%s already is in %s, no copy needed", source.name, destination.parent
        )
        return source

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)
    except OSError as e:
        log.error("Destination file %s could not be written: %s", destination, e)
        return None

    log.info("Copied %s to %s", source, destination)
    return destination


def remove_if_empty(directory: Path, workspace: Path) -> bool:
    """Remove *directory* when it is empty and not the workspace root.

    Concurrent writers can refill the directory between the check and the
    removal; that case is logged and the directory is kept.

    Returns:
        True if the directory was removed

    """
    try:
        if directory.resolve() == workspace.resolve():
            return False
        if not directory.is_dir() or any(directory.iterdir()):
            return False
        directory.rmdir()
    except OSError as e:
        log.warning("Cannot remove scratch directory %s: %s", directory, e)
        return False

    log.debug("Removed empty scratch directory %s", directory)
    return True
