"""Batch pipeline: discover -> read -> scan -> evaluate -> report -> merge.

Each file is processed independently; workers share no mutable state.
Reports are merged by path, so a parallel run and a sequential run over
the same inputs produce identical reports.
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, Optional, Union

from .config import DEFAULT_CONFIG, CheckerConfig
from .evaluation import evaluate
from .exceptions import InputError
from .logging_config import get_logger
from .reporting import FileReport, Report, build_file_report, merge_reports
from .rules import list_rules
from .scanning import discover_files, read_source, scan

logger = get_logger(__name__)

MAX_AUTO_WORKERS = 8


def resolve_workers(requested: Optional[int]) -> int:
    """Worker count: explicit value, else min(cpu count, 8)."""
    if requested is not None:
        return max(1, requested)
    return max(1, min(os.cpu_count() or 1, MAX_AUTO_WORKERS))


def analyze_source(
    text: Union[str, bytes],
    path: str = "<memory>",
    config: Optional[CheckerConfig] = None,
    language: Optional[str] = None,
) -> FileReport:
    """Scan and evaluate one in-memory source text."""
    config = config or DEFAULT_CONFIG
    unit = scan(text, path=path, language=language, config=config)
    return build_file_report(evaluate(unit, config=config), unit, config)


def analyze_file(filepath: Path, config: Optional[CheckerConfig] = None) -> FileReport:
    """Read, scan and evaluate one file.

    Raises:
        InputError: If the file cannot be read
    """
    config = config or DEFAULT_CONFIG
    data = read_source(filepath, config)
    report = analyze_source(data, path=str(filepath), config=config)
    logger.debug(f"Analyzed: {filepath} ({len(report.findings)} findings)")
    return report


def run_batch(paths: Iterable[Union[str, Path]], config: Optional[CheckerConfig] = None) -> Report:
    """Analyse files and directories into one merged report.

    Unreadable files are recorded as input errors and the batch continues.
    Any other exception (configuration problems, internal invariant
    violations) propagates.

    Args:
        paths: Files and/or directories
        config: Checker configuration

    Returns:
        Report with file reports ordered by path

    Raises:
        InvalidConfigError: If the configuration names unregistered rules
    """
    config = config or DEFAULT_CONFIG
    config.validate_rule_ids({rule.id for rule in list_rules()})
    files, errors = discover_files([Path(p) for p in paths], config)
    reports: list[FileReport] = []
    workers = resolve_workers(config.workers)

    if workers == 1 or len(files) <= 1:
        for filepath in files:
            try:
                reports.append(analyze_file(filepath, config))
            except InputError as e:
                logger.warning(f"Skipping {filepath}: {e.reason}")
                errors.append(e)
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(analyze_file, fp, config): fp for fp in files}
            for future in as_completed(futures):
                try:
                    reports.append(future.result())
                except InputError as e:
                    logger.warning(f"Skipping {futures[future]}: {e.reason}")
                    errors.append(e)

    logger.info(
        f"Batch complete: {len(reports)} analyzed, {len(errors)} input error(s), {workers} worker(s)"
    )
    return merge_reports(reports, errors)
