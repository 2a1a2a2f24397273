"""Run orchestration across all source mailboxes of a command line."""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from chewmail.config.archive_config import AppConfig, ArchiveOptions
from chewmail.models.run_counters import RunCounters
from chewmail.services.selection.selection_policy import SelectionPolicy
from chewmail.services.templating.date_template import has_specifiers
from chewmail.storage.audit_log import AuditLog

from .archive_engine import ArchiveEngine, MailboxOpener, open_source_mailbox
from .output_router import DestinationRegistry, OutputRouter

logger = logging.getLogger(__name__)


class RunOrchestrator:
    """
    Drives the archive engine over every source mailbox, in order.

    Owns the run-scoped destination registry: destinations stay open
    across source mailboxes and are closed once, at the end of the run.
    """

    def __init__(
        self,
        options: ArchiveOptions,
        app_config: Optional[AppConfig] = None,
        audit_log: Optional[AuditLog] = None,
        now: Optional[datetime] = None,
        opener: MailboxOpener = open_source_mailbox,
    ):
        """
        Initialize orchestrator.

        Args:
            options: Run options from the command line
            app_config: Settings file contents (default: built-in defaults)
            audit_log: Optional audit trail
            now: Reference time for day-based cutoffs (default: now)
            opener: Callable opening a source mailbox
        """
        self.options = options
        self.app_config = app_config or AppConfig()
        self.registry = DestinationRegistry()
        self.router = OutputRouter(
            self.registry,
            archive_format=options.archive_format,
            dry_run=options.dry_run,
            create_parents=self.app_config.archive.create_parents,
        )
        self.policy = SelectionPolicy(options.cutoff(), now=now)
        self.engine = ArchiveEngine(
            options, self.router, self.policy, audit_log=audit_log, opener=opener
        )

    def run(
        self,
        sources: Sequence[str],
        report: Callable[[str], None] = print,
    ) -> List[RunCounters]:
        """
        Archive every source mailbox.

        Args:
            sources: Source mailbox identifiers, processed in the order given
            report: Sink for per-mailbox summary lines

        Returns:
            RunCounters for each source mailbox

        Raises:
            MailboxError: On the first failure; later sources are not attempted
        """
        if self.options.dry_run:
            logger.info("Dry run: no mailbox will be modified")
        if not has_specifiers(self.options.output_box):
            logger.info("Output box %s has no date specifiers", self.options.output_box)

        results: List[RunCounters] = []

        try:
            for source in sources:
                counters = self.engine.process(source)
                results.append(counters)

                if self.options.reports_summary:
                    report(counters.summary())

            self.registry.close_all()
        except Exception:
            self.registry.release_all()
            raise

        logger.info(
            "Archived %d of %d messages into %d mailboxes",
            sum(c.archived for c in results),
            sum(c.considered for c in results),
            len(self.registry),
        )
        return results
