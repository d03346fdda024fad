"""Interpretation and rendering of a³ XML result documents."""

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from xml.etree.ElementTree import Element

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from a3_analysis_action.compatibility import REQUIRED_BUILD, REQUIRED_VERSION
from a3_analysis_action.errors import ResultSchemaError
from a3_analysis_action.project_config import parse_xml_document

log = logging.getLogger(__name__)

SUCCESS = "success"
DEFAULT_EXPECTATION = "ok"
FAILED_MARKER = "><"
UNBOUNDED = "unbounded/infeasible"

ANALYSIS_TYPES: Mapping[str, str] = {
    "aiT": "aiT",
    "TimingProfiler": "TP",
    "TimeWeaver": "TW",
    "StackAnalyzer": "Stack",
    "ValueAnalyzer": "Value",
    "ResultCombinator": "RComb",
    "Control-Flow Visualizer": "CFG",
    "TraceVisualizer": "TraVi",
}
TIMING_TYPES = frozenset({"aiT", "TP", "TW"})
SILENT_TYPES = frozenset({"Value", "CFG", "TraVi"})

ID_WIDTH = 35
ROW_FORMAT = "%-5s  %9s  %35s  %20s  %5s  %3s  %6s"
HYPERLINK_MARKUP = re.compile(r"\x1b\]8;;.*?\x1b\\")

# File system timestamps can lag the wall clock by one timer tick.
MTIME_SLACK = 0.01

INCOMPATIBLE_SCHEMA = (
    "This a³ CI integration is incompatible with a³ versions prior to "
    f"{REQUIRED_VERSION} {REQUIRED_BUILD}! Request the latest a³ version "
    "from support@absint.com."
)


type LinkFormatter = Callable[[str, str], str]


def plain_link(target: str, text: str) -> str:
    """Render *text* without a hyperlink."""
    return text


@dataclass(frozen=True, kw_only=True)
class AnalysisItemResult:
    """Outcome of one analysis item in the result document."""

    analysis_id: str
    analysis_type: str
    analysis_time: str
    payload: str
    warning_count: int
    error_count: int
    status: str
    expectation: str = DEFAULT_EXPECTATION
    expectation_met: bool = True

    @property
    def failed(self) -> bool:
        """Failed analysis status, or an expectation that was not met."""
        return self.status != SUCCESS or not self.expectation_met


@dataclass(frozen=True, kw_only=True)
class ResultSummary:
    """All items of a result document plus their rendered report."""

    items: Sequence[AnalysisItemResult]
    failed_items: Sequence[str]
    lines: Sequence[str]

    @property
    def failed(self) -> bool:
        """Whether at least one item failed."""
        return bool(self.failed_items)


def result_file_is_fresh(path: Path, started_at: float) -> bool:
    """Check that *path* exists and was modified at or after *started_at*."""
    try:
        modified = path.stat().st_mtime
    except OSError:
        return False
    return modified >= started_at - MTIME_SLACK


def shorten_analysis_type(analysis_type: str) -> str:
    """Map the document's analysis type to its short report name."""
    return ANALYSIS_TYPES.get(analysis_type, analysis_type)


def _child_text(node: Element, tag: str, analysis_id: str) -> str:
    child = next(node.iter(tag), None)
    if child is None:
        raise ResultSchemaError(
            f"Result '{analysis_id}' has no '{tag}' entry. {INCOMPATIBLE_SCHEMA}",
            analysis_id,
        )
    return (child.text or "").strip()


def _count(node: Element, attribute: str, analysis_id: str) -> int:
    try:
        return int(node.get(attribute, ""))
    except ValueError as e:
        raise ResultSchemaError(
            f"Result '{analysis_id}' has a non-numeric {attribute}. "
            f"{INCOMPATIBLE_SCHEMA}",
            analysis_id,
        ) from e


def render_timing(node: Element, analysis_id: str) -> str:
    """Render ``<cycles> <unit> = <time>``, or the unbounded marker."""
    cycles = _child_text(node, "cycles", analysis_id)
    unit = _child_text(node, "unit", analysis_id)
    time = _child_text(node, "time", analysis_id)
    if cycles == "-1":
        return UNBOUNDED
    return f"{cycles} {unit} = {time}"


def render_stack(node: Element) -> str:
    """Render stack maxima as ``name=value,...`` followed by the unit."""
    maxima = [
        f"{m.get('name', '')}={m.get('value') or (m.text or '').strip()}"
        for m in node.iter("maximum")
    ]
    if not maxima:
        return ""
    return ",".join(maxima) + " bytes"


def render_combinator(node: Element, analysis_id: str) -> str:
    """Render one ``value unit`` pair, or a bracketed list of them.

    Values are taken from a single ``values`` grouping when present and from
    the item itself otherwise.
    """
    groups = list(node.iter("values"))
    if len(groups) > 1:
        raise ResultSchemaError(
            f"Result '{analysis_id}' has more than one 'values' entry. "
            f"{INCOMPATIBLE_SCHEMA}",
            analysis_id,
        )
    container = groups[0] if groups else node
    values = [
        f"{(v.text or '').strip()} {v.get('unit', '')}".rstrip()
        for v in container.iter("value")
    ]
    if len(values) > 1:
        return "[" + ",".join(values) + "]"
    return "".join(values)


def render_payload(node: Element, analysis_type: str, analysis_id: str) -> str:
    """Render the type-specific payload of a successful item.

    Raises:
        ResultSchemaError: For unsupported types or missing payload entries

    """
    if analysis_type in TIMING_TYPES:
        return render_timing(node, analysis_id)
    if analysis_type == "Stack":
        return render_stack(node)
    if analysis_type == "RComb":
        return render_combinator(node, analysis_id)
    if analysis_type in SILENT_TYPES:
        return ""
    raise ResultSchemaError(
        f"Analysis type {analysis_type} is not supported by this version of the "
        "a³ CI integration. Request an update from support@absint.com.",
        analysis_id,
    )


def parse_result_item(node: Element) -> AnalysisItemResult:
    """Extract one ``result`` node.

    Raises:
        ResultSchemaError: If the node lacks attributes or children that
            supported a³ versions always write

    """
    analysis_id = node.get("id", "")
    warning_count = node.get("warning_count", "")
    error_count = node.get("error_count", "")
    status = node.get("analysis_status", "")
    if not warning_count or not error_count or not status:
        raise ResultSchemaError(INCOMPATIBLE_SCHEMA, analysis_id or None)

    analysis_type = shorten_analysis_type(node.get("type", ""))
    expectation = DEFAULT_EXPECTATION
    expectation_met = True
    payload = ""

    if status == SUCCESS:
        expectations = list(node.iter("expectation"))
        if len(expectations) == 1 and (expectations[0].text or "").strip() != SUCCESS:
            expected = _child_text(node, "expected_result", analysis_id)
            expectation = f"FAILED({expected})"
            expectation_met = False
        payload = render_payload(node, analysis_type, analysis_id)

    return AnalysisItemResult(
        analysis_id=analysis_id,
        analysis_type=analysis_type,
        analysis_time=node.get("analysis_time", ""),
        payload=payload,
        warning_count=_count(node, "warning_count", analysis_id),
        error_count=_count(node, "error_count", analysis_id),
        status=status,
        expectation=expectation,
        expectation_met=expectation_met,
    )


def render_item(
    item: AnalysisItemResult,
    link_target: str | None = None,
    format_link: LinkFormatter = plain_link,
) -> str:
    """Render one fixed-width report line.

    With a *link_target* the id is rendered through *format_link*. Padding is
    computed on the visible label, without terminal hyperlink escapes.
    """
    label = item.analysis_id
    if link_target is not None:
        label = format_link(link_target, item.analysis_id)
    visible = HYPERLINK_MARKUP.sub("", label)
    padding = " " * max(ID_WIDTH + 2 - len(visible), 2)
    row = ROW_FORMAT % (
        item.analysis_type,
        item.analysis_time,
        item.payload,
        item.expectation,
        item.warning_count,
        item.error_count,
        FAILED_MARKER if item.failed else "",
    )
    return f"{label}{padding}{row}"


def render_header() -> Sequence[str]:
    """Return the report title and column header lines."""
    columns = ROW_FORMAT % (
        "Type",
        "Time(sec)",
        "Result",
        "Expectation",
        "#Warn",
        "#Err",
        "Failed",
    )
    return (
        "================",
        "Analysis Results",
        "================",
        f"{'ID':<{ID_WIDTH + 2}}{columns}",
    )


def interpret_results(
    result_file: Path,
    html_links: Mapping[str, str] | None = None,
    format_link: LinkFormatter = plain_link,
) -> ResultSummary:
    """Parse *result_file*, classify every item and render the report.

    Args:
        result_file: XML result document written by the analysis run
        html_links: Link target per analysis id with an HTML report
        format_link: Renders a hyperlink for the CI console

    Returns:
        Items in document order, failed ids and rendered report lines

    Raises:
        ResultSchemaError: If the document is unreadable or has an
            incompatible structure

    """
    html_links = html_links or {}
    try:
        root = parse_xml_document(result_file)
    except OSError as e:
        raise ResultSchemaError(f"XML result file {result_file} was not found: {e}") from e
    except (ET.ParseError, DefusedXmlException) as e:
        raise ResultSchemaError(
            f"XML result file {result_file} could not be parsed: {e}"
        ) from e

    nodes = list(root.iter("result"))
    if not nodes:
        raise ResultSchemaError(
            "There must be at least one 'result' entry in the XML result file"
        )

    items: list[AnalysisItemResult] = []
    failed: dict[str, None] = {}
    lines = list(render_header())
    for node in nodes:
        item = parse_result_item(node)
        items.append(item)
        if item.failed:
            failed[item.analysis_id] = None
        lines.append(
            render_item(item, html_links.get(item.analysis_id), format_link)
        )

    log.debug("Interpreted %d result item(s), %d failed", len(items), len(failed))
    return ResultSummary(items=items, failed_items=tuple(failed), lines=lines)
