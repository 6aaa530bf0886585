"""Update enumeration and upgrade pipeline.

Runs every selected package source through the same sequence: enabled
check, availability probe, enumeration with exclusions, then one upgrade
per package with per-item accounting. A failing source never prevents the
next source from running.

The two phases are exposed separately so the CLI can show what will be
upgraded and ask for confirmation in between.
"""

from __future__ import annotations

import dataclasses
import logging
import subprocess
from collections.abc import Callable, Mapping, Sequence

from wupctl.core.config import UpdaterConfig
from wupctl.core.executor import SOURCE_ORDER, get_operator, get_scanner
from wupctl.core.logs import log_success
from wupctl.models.outcome import SourceStatus, SourceSummary
from wupctl.models.package import PackageSource
from wupctl.models.run_result import RunMetadata, RunResult, SourceRun
from wupctl.operators.base import Operator, ProcessExecutionError
from wupctl.scanners.base import EnumerationError, Scanner, SourceUnavailableError
from wupctl.scanners.store import StoreScanner

logger = logging.getLogger(__name__)

STORE_SCAN_TRIGGERED = "Store update scan triggered"
STORE_SCAN_PENDING = "Store updates cannot be listed without winget; an update scan will be triggered"

SourceCallback = Callable[[PackageSource], None]


class UpdatePipeline:
    """Enumerate and upgrade packages across sources.

    Scanners and operators default to the real implementations for each
    source; tests and callers may inject their own.

    Attributes:
        config: Configuration supplying enable flags, exclusions and timeout.
        list_only: Enumerate without upgrading.
    """

    def __init__(
        self,
        config: UpdaterConfig,
        *,
        list_only: bool = False,
        scanners: Mapping[PackageSource, Scanner] | None = None,
        operators: Mapping[PackageSource, Operator] | None = None,
    ) -> None:
        self._config = config
        self._list_only = list_only
        self._scanners = dict(scanners or {})
        self._operators = dict(operators or {})

    @property
    def config(self) -> UpdaterConfig:
        """Configuration of this pipeline."""
        return self._config

    @property
    def list_only(self) -> bool:
        """Whether upgrades are skipped."""
        return self._list_only

    def scanner(self, source: PackageSource) -> Scanner:
        """Return (and cache) the scanner of a source."""
        if source not in self._scanners:
            self._scanners[source] = get_scanner(source)
        return self._scanners[source]

    def operator(self, source: PackageSource) -> Operator:
        """Return (and cache) the operator of a source."""
        if source not in self._operators:
            self._operators[source] = get_operator(
                source, timeout=self._config.upgrade_timeout_seconds
            )
        return self._operators[source]

    def run(
        self,
        sources: Sequence[PackageSource] = SOURCE_ORDER,
        on_source: SourceCallback | None = None,
    ) -> RunResult:
        """Enumerate every source and, unless list-only, upgrade.

        Args:
            sources: Sources to process, in order.
            on_source: Optional callback invoked before each source starts.

        Returns:
            RunResult with one SourceRun per source.
        """
        listing = self.enumerate(sources, on_source)
        if self._list_only:
            return listing
        return self.upgrade(listing, on_source)

    def enumerate(
        self,
        sources: Sequence[PackageSource] = SOURCE_ORDER,
        on_source: SourceCallback | None = None,
    ) -> RunResult:
        """Enumerate upgradeable packages for each source.

        Sources with packages to upgrade end with status NOT_RUN; every
        other source already carries its final status.
        """
        result = RunResult(metadata=RunMetadata.create(list_only=self._list_only))
        for source in sources:
            if on_source is not None:
                on_source(source)
            result.runs.append(self.enumerate_source(source))
        return result

    def upgrade(self, listing: RunResult, on_source: SourceCallback | None = None) -> RunResult:
        """Upgrade every pending source of an enumeration result.

        Args:
            listing: Result of enumerate().
            on_source: Optional callback invoked before each pending source.

        Returns:
            New RunResult with final statuses and outcomes.
        """
        result = RunResult(metadata=dataclasses.replace(listing.metadata, list_only=False))
        for run in listing.runs:
            if run.summary.status == SourceStatus.NOT_RUN and on_source is not None:
                on_source(run.summary.source)
            result.runs.append(self.upgrade_source(run))
        return result

    def run_source(self, source: PackageSource) -> SourceRun:
        """Run both phases for a single source."""
        run = self.enumerate_source(source)
        if self._list_only:
            return run
        return self.upgrade_source(run)

    def enumerate_source(self, source: PackageSource) -> SourceRun:
        """Enumerate upgradeable packages of one source.

        Args:
            source: Package source to process.

        Returns:
            SourceRun whose status is DISABLED, UNAVAILABLE, ERROR,
            NO_UPDATES or, when packages are waiting, NOT_RUN.
        """
        if not self._config.is_enabled(source):
            logger.info("%s is disabled, skipping", source.label)
            return SourceRun(SourceSummary.terminal(source, SourceStatus.DISABLED))

        scanner = self.scanner(source)
        if not scanner.is_available():
            logger.warning("%s is not available on this system", source.label)
            return SourceRun(SourceSummary.terminal(source, SourceStatus.UNAVAILABLE))

        if _is_scan_only(scanner):
            logger.info(STORE_SCAN_PENDING)
            return SourceRun(
                SourceSummary.terminal(source, SourceStatus.NOT_RUN, message=STORE_SCAN_PENDING)
            )

        try:
            records = scanner.scan(self._config.exclusions_for(source))
        except SourceUnavailableError as e:
            logger.warning("%s", e)
            return SourceRun(SourceSummary.terminal(source, SourceStatus.UNAVAILABLE))
        except EnumerationError as e:
            logger.error("%s", e)
            return SourceRun(SourceSummary.terminal(source, SourceStatus.ERROR, errors=[str(e)]))

        logger.info("%s: %d upgradeable package(s)", source.label, len(records))

        if not records:
            return SourceRun(SourceSummary.terminal(source, SourceStatus.NO_UPDATES))

        return SourceRun(
            SourceSummary.terminal(source, SourceStatus.NOT_RUN), records=tuple(records)
        )

    def upgrade_source(self, run: SourceRun) -> SourceRun:
        """Upgrade the packages of an enumerated source.

        Sources not waiting for upgrades (status other than NOT_RUN) are
        returned unchanged. A package manager that cannot be launched ends
        its own source in ERROR.

        Args:
            run: SourceRun produced by enumerate_source().

        Returns:
            SourceRun with the classified summary and every outcome.
        """
        source = run.summary.source
        if run.summary.status != SourceStatus.NOT_RUN:
            return run

        scanner = self.scanner(source)
        if _is_scan_only(scanner):
            return self._trigger_store_scan(scanner)

        try:
            summary, outcomes = self.operator(source).upgrade_all(run.records)
        except SourceUnavailableError as e:
            logger.warning("%s", e)
            return SourceRun(
                SourceSummary.terminal(source, SourceStatus.UNAVAILABLE), records=run.records
            )
        except ProcessExecutionError as e:
            logger.error("%s", e)
            return SourceRun(
                SourceSummary.terminal(source, SourceStatus.ERROR, errors=[str(e)]),
                records=run.records,
            )

        _log_summary(summary)
        return SourceRun(summary, records=run.records, outcomes=tuple(outcomes))

    def _trigger_store_scan(self, scanner: StoreScanner) -> SourceRun:
        """Handle the Store when only the management scan trigger exists."""
        source = scanner.source
        try:
            result = scanner.trigger_update_scan()
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.error("Store update scan could not be triggered: %s", e)
            return SourceRun(
                SourceSummary.terminal(
                    source, SourceStatus.ERROR, errors=[f"Store update scan failed: {e}"]
                )
            )

        if not result.success:
            logger.error("Store update scan failed (exit code %d)", result.returncode)
            return SourceRun(
                SourceSummary.terminal(
                    source,
                    SourceStatus.ERROR,
                    message=result.output or None,
                    errors=[f"Store update scan failed (exit code {result.returncode})"],
                )
            )

        log_success(logger, STORE_SCAN_TRIGGERED)
        return SourceRun(
            SourceSummary.terminal(source, SourceStatus.SUCCESS, message=STORE_SCAN_TRIGGERED)
        )


def _is_scan_only(scanner: Scanner) -> bool:
    """Check whether a scanner can only trigger an opaque update scan."""
    return isinstance(scanner, StoreScanner) and not scanner.supports_enumeration()


def pending_sources(result: RunResult) -> list[PackageSource]:
    """Sources of an enumeration result that are waiting for upgrades."""
    return [run.summary.source for run in result.runs if run.summary.status == SourceStatus.NOT_RUN]


def _log_summary(summary: SourceSummary) -> None:
    """Log the classified result of an upgrade batch."""
    label = summary.source.label
    if summary.status == SourceStatus.SUCCESS:
        log_success(logger, "%s: %d package(s) updated", label, summary.updated_count)
    elif summary.status == SourceStatus.PARTIAL:
        logger.warning(
            "%s: %d updated, %d failed", label, summary.updated_count, len(summary.errors)
        )
    else:
        logger.error("%s: all %d upgrade(s) failed", label, len(summary.errors))
