"""Replays stored error checks to catch defects that came back."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from ..logging_config import get_logger
from ..tools.runner import CommandRunner
from .models import (
    CHECK_CONTENT_CONTAINS,
    CHECK_FILE_EXISTS,
    CHECK_TEST_PASSES,
    ErrorRecord,
)

logger = get_logger(__name__)


@dataclass
class RegressionReport:
    checked: int = 0
    details: list[str] = field(default_factory=list)

    @property
    def regressions(self) -> int:
        return len(self.details)


def _read(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None


def replay_checks(
    errors: Iterable[ErrorRecord],
    root: Path,
    runner: CommandRunner,
    timeout: int = 60,
) -> RegressionReport:
    """Re-verify each stored check against the current tree.

    Records without a check are skipped and not counted. A failing check
    adds one ``REGRESSION:`` detail.
    """
    report = RegressionReport()
    root = Path(root)

    for error in errors:
        check = error.check
        if check is None:
            continue

        if check.type == CHECK_FILE_EXISTS:
            if not error.file:
                continue
            report.checked += 1
            if not (root / error.file).exists():
                report.details.append(
                    f"REGRESSION: {error.description} (file removed: {error.file})"
                )

        elif check.type == CHECK_CONTENT_CONTAINS:
            if not error.file or check.value is None:
                continue
            report.checked += 1
            content = _read(root / error.file)
            if content is None or check.value not in content:
                report.details.append(f"REGRESSION: {error.description}")

        elif check.type == CHECK_TEST_PASSES:
            if not check.cmd:
                continue
            report.checked += 1
            result = runner.run(check.cmd, timeout=timeout)
            if not result.ok:
                report.details.append(
                    f"REGRESSION: {error.description} (test failing: {result.failure_reason})"
                )

    logger.debug("Regression guard: %d checked, %d regressions", report.checked, report.regressions)
    return report
