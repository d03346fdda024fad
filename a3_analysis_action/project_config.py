"""Reading of a³ project configuration (APX) documents."""

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from xml.etree.ElementTree import Element

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException
from pydantic import Field

from a3_analysis_action.errors import ProjectConfigError
from a3_analysis_action.models.base import Model
from a3_analysis_action.paths import TargetOS, resolve_path

log = logging.getLogger(__name__)

DEFAULT_PEDANTIC_LEVEL = 0


class ProjectConfig(Model):
    """Data extracted from a project configuration document."""

    path: Path = Field(..., description="Location of the project document")
    target: str = Field(..., description="a³ target identifier, e.g. 'arm'")
    report_file: Path | None = Field(
        default=None, description="Configured report file, None if unspecified"
    )
    result_file: Path | None = Field(
        default=None, description="Configured XML result file, None if unspecified"
    )
    pedantic_level: int = Field(default=DEFAULT_PEDANTIC_LEVEL, ge=0, le=2)
    html_reports: Mapping[str, Path] = Field(
        default_factory=dict, description="HTML report file per analysis id"
    )
    issues: Sequence[str] = Field(
        default_factory=tuple, description="Structural problems found while reading"
    )


def parse_xml_document(path: Path) -> Element:
    """Parse *path* with DTDs and external entities disabled.

    Raises:
        OSError: If the file cannot be read
        ET.ParseError: If the markup is malformed
        DefusedXmlException: If the document declares a DTD or entities

    """
    return ET.parse(path, forbid_dtd=True).getroot()


class _Reader:
    """Extraction state for one document; collects structural issues."""

    def __init__(self, path: Path, root: Element, target_os: TargetOS) -> None:
        self.path = path
        self.root = root
        self.target_os = target_os
        self.issues: list[str] = []

    def issue(self, message: str) -> None:
        log.error("Project structure error in %s: %s", self.path, message)
        self.issues.append(message)

    def resolve(self, text: str) -> Path:
        return Path(resolve_path(text.strip(), self.path.parent, self.target_os))

    def files_entry(self, element: str) -> Path | None:
        files = list(self.root.iter("files"))
        if len(files) != 1:
            self.issue(f"There must be exactly one 'files' node, found {len(files)}")
            return None

        entries = list(files[0].iter(element))
        if not entries:
            log.info("No %s file entry in %s", element, self.path)
            return None
        if len(entries) > 1:
            self.issue(f"There is more than one '{element}' file entry")
            return None

        resolved = self.resolve(entries[0].text or "")
        if not resolved.parent.is_dir():
            log.warning(
                "Directory of %s file %s does not exist, using a scratch file instead",
                element,
                resolved,
            )
            return None
        return resolved

    def pedantic_level(self) -> int:
        node: Element = self.root
        for tag in ("options", "analyses_options", "pedantic_level"):
            child = next(node.iter(tag), None)
            if child is None:
                log.info("No '%s' node in %s, using default pedantic level", tag, self.path)
                return DEFAULT_PEDANTIC_LEVEL
            node = child

        try:
            level = int((node.text or "").strip())
        except ValueError:
            self.issue(f"Pedantic level {node.text!r} is not an integer")
            return DEFAULT_PEDANTIC_LEVEL
        if not 0 <= level <= 2:
            self.issue(f"Pedantic level {level} is outside 0-2")
            return DEFAULT_PEDANTIC_LEVEL
        return level

    def html_reports(self) -> dict[str, Path]:
        reports: dict[str, Path] = {}
        analyses = list(self.root.iter("analyses"))
        if not analyses:
            return reports
        if len(analyses) > 1:
            self.issue("There must be at most one 'analyses' node")
            return reports

        for analysis in analyses[0].iter("analysis"):
            analysis_id = analysis.get("id", "")
            html = list(analysis.iter("html_report"))
            if len(html) != 1:
                continue
            if not (html[0].text or "").strip():
                log.warning(
                    "Empty 'html_report' of analysis %s in %s, no report link",
                    analysis_id,
                    self.path,
                )
                continue
            reports[analysis_id] = self.resolve(html[0].text or "")
        return reports


def read_project_config(
    path: str | Path, target_os: TargetOS | None = None
) -> ProjectConfig:
    """Parse the project configuration document at *path*.

    Relative paths inside the document are resolved against the directory
    containing it. Multiplicity violations are logged, recorded in
    :attr:`ProjectConfig.issues` and the offending section is treated as
    absent.

    Args:
        path: Project configuration (``.apx``) document
        target_os: OS used for path normalization, defaults to the host

    Returns:
        The extracted configuration

    Raises:
        ProjectConfigError: If the document is missing or does not parse

    """
    apx = Path(path)
    target_os = target_os or TargetOS.current()

    try:
        root = parse_xml_document(apx)
    except OSError as e:
        raise ProjectConfigError(
            f"Project file {apx} could not be read: {e.strerror or e}"
        ) from e
    except (ET.ParseError, DefusedXmlException) as e:
        raise ProjectConfigError(
            f"Project file {apx} could not be parsed ({e}). Make sure that you "
            "provided an a³ APX project file instead of an a³ APX workspace file."
        ) from e

    reader = _Reader(apx, root, target_os)
    report_file = reader.files_entry("report")
    result_file = reader.files_entry("xml_results")
    pedantic_level = reader.pedantic_level()
    html_reports = reader.html_reports()
    log.info("Pedantic level in project: %d", pedantic_level)

    return ProjectConfig(
        path=apx,
        target=root.get("target", ""),
        report_file=report_file,
        result_file=result_file,
        pedantic_level=pedantic_level,
        html_reports=html_reports,
        issues=tuple(dict.fromkeys(reader.issues)),
    )
