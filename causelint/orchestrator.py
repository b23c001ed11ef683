"""
Orchestrator

Glue layer. Wires parsing, collection, validation, fixing and
explanation together. Each source unit is analysed on its own; nothing
is carried from one unit to the next.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import structlog

from .config import AnalyzerConfig
from .data_structures import CatchBinding, Finding
from .detectors import DetectorContext, collect_candidates, iter_catch_bindings
from .explanation import Explanation, explain
from .fixes import apply_edits, select_disjoint
from .git_history import get_changed_files
from .parsing import ParsedUnit, parse_source
from .reporter import report_catch

logger = structlog.get_logger(component="causelint.orchestrator")


@dataclass(frozen=True)
class HandlerReport:
    binding: CatchBinding
    findings: List[Finding]


@dataclass(frozen=True)
class FixResult:
    source: str
    applied: int
    remaining: List[Finding]


@dataclass
class FileReport:
    path: Path
    explanations: List[Explanation] = field(default_factory=list)
    fixed: int = 0

    @property
    def findings(self) -> List[Finding]:
        return [e.finding for e in self.explanations]


def _context(unit: ParsedUnit, config: Optional[AnalyzerConfig]) -> DetectorContext:
    config = config or AnalyzerConfig()
    return DetectorContext(unit=unit, error_constructors=config.error_constructors)


def analyze_unit(unit: ParsedUnit, config: Optional[AnalyzerConfig] = None) -> List[HandlerReport]:
    """One report per catch handler, in source order."""
    context = _context(unit, config)
    reports = []

    for binding in iter_catch_bindings(context):
        candidates = collect_candidates(binding, context)
        reports.append(HandlerReport(
            binding=binding,
            findings=report_catch(binding, candidates, context),
        ))

    return reports


def analyze_source(
    source: str,
    suffix: str = ".js",
    config: Optional[AnalyzerConfig] = None,
) -> List[Finding]:
    unit = parse_source(source, suffix)
    findings = [f for report in analyze_unit(unit, config) for f in report.findings]
    findings.sort(key=lambda f: f.location.start_byte)
    return findings


def fix_source(
    source: str,
    suffix: str = ".js",
    config: Optional[AnalyzerConfig] = None,
) -> FixResult:
    """
    Apply every available fix in one batch.

    Each edit stays inside its own argument list, so no re-parse is
    needed between them.
    """
    findings = analyze_source(source, suffix, config)
    edits = select_disjoint([f.fix for f in findings if f.fix is not None])
    if not edits:
        return FixResult(source=source, applied=0, remaining=findings)

    fixed = apply_edits(source, edits)
    return FixResult(
        source=fixed,
        applied=len(edits),
        remaining=analyze_source(fixed, suffix, config),
    )


def analyze_file(
    file_path: Path,
    config: Optional[AnalyzerConfig] = None,
    fix: bool = False,
) -> Optional[FileReport]:
    """
    Analyse one file. Returns None for files that cannot be read as UTF-8.

    With `fix=True` the file is rewritten when at least one fix applies,
    and the report lists what remains after fixing.
    """
    try:
        source = file_path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("file_skipped", path=str(file_path), reason=str(e))
        return None

    suffix = file_path.suffix
    report = FileReport(path=file_path)

    if fix:
        result = fix_source(source, suffix, config)
        if result.applied:
            file_path.write_bytes(result.source.encode("utf-8"))
            logger.info("fixes_applied", path=str(file_path), count=result.applied)
        report.fixed = result.applied
        findings = result.remaining
    else:
        findings = analyze_source(source, suffix, config)

    report.explanations = explain(findings, str(file_path))
    logger.debug("unit_analyzed", path=str(file_path), findings=len(findings))
    return report


def _is_excluded(file_path: Path, root: Path, config: AnalyzerConfig) -> bool:
    parts = file_path.relative_to(root).parts[:-1]
    return any(p.startswith(".") or p in config.exclude_dirs for p in parts)


def discover_files(paths: Sequence[Path], config: AnalyzerConfig) -> List[Path]:
    """
    Expand directories into source files.

    Explicit file arguments are kept even if their directory would be
    excluded. Hidden and excluded directories are skipped during expansion.
    """
    extensions = {ext.lower() for ext in config.extensions}
    found = set()

    for path in paths:
        path = Path(path).resolve()
        if path.is_file():
            if path.suffix.lower() in extensions:
                found.add(path)
            continue

        for file_path in path.rglob("*"):
            if not file_path.is_file() or file_path.suffix.lower() not in extensions:
                continue
            if _is_excluded(file_path, path, config):
                continue
            found.add(file_path)

    return sorted(found)


def analyze_paths(
    paths: Iterable[Path],
    config: Optional[AnalyzerConfig] = None,
    fix: bool = False,
    changed_since: Optional[str] = None,
) -> List[FileReport]:
    """
    Analyse files and directories.

    With `changed_since`, only files changed in Git since that revision
    are analysed. Raises ValueError if a path does not exist or is not
    inside a Git repository when `changed_since` is given.
    """
    config = config or AnalyzerConfig()
    paths = [Path(p) for p in paths]

    for path in paths:
        if not path.exists():
            raise ValueError(f"Path does not exist: {path}")

    files = discover_files(paths, config)

    if changed_since is not None:
        changed = set()
        for path in paths:
            changed.update(get_changed_files(str(path), changed_since))
        files = [f for f in files if f in changed]

    reports = []
    for file_path in files:
        report = analyze_file(file_path, config, fix=fix)
        if report is not None:
            reports.append(report)

    return reports
