"""Pass scheduling - sweeps every configured board, once or periodically.

Passes share no state: each one re-reads the boards from the service, so a
failed or skipped pass is repaired by the next one.
"""

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone

from .core.exceptions import CollateError
from .core.models import BoardConfig, BoardResult, CollateConfig, PassResult
from .core.types import BoardErrorPolicy, Seconds
from .processor import BoardProcessor
from .providers.base import BoardService

logger = logging.getLogger(__name__)


class Scheduler:
    """Runs passes over the configured boards."""

    def __init__(
        self,
        service: BoardService,
        config: CollateConfig,
        period: Seconds = 30 * 60,
        once: bool = False,
        policy: BoardErrorPolicy | None = None,
        processor: BoardProcessor | None = None,
        on_pass: Callable[[PassResult], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the scheduler.

        Args:
            service: Board service for all remote calls
            config: Boards and source columns
            period: Seconds from the start of one pass to the start of the next
            once: Run a single pass and stop
            policy: Board error policy (default: the config's `on_board_error`)
            processor: Optional processor override
            on_pass: Called with each finished PassResult
            clock: Monotonic clock, injectable for tests
            sleep: Sleep function, injectable for tests
        """
        self.service = service
        self.config = config
        self.period = period
        self.once = once
        self.policy = policy or config.on_board_error
        self.processor = processor or BoardProcessor(service, config.columns)
        self.on_pass = on_pass
        self._clock = clock
        self._sleep = sleep

    def _process(self, board_config: BoardConfig) -> BoardResult:
        board = self.service.fetch_board(board_config.id)
        return self.processor.process_board(board)

    def run_pass(self) -> PassResult:
        """
        Process every configured board in order.

        With the ABORT policy the first failing board ends the pass and the
        remaining boards wait for the next one. With CONTINUE the failure is
        recorded and the next board is attempted.
        """
        started_at = datetime.now(timezone.utc)
        self.service.clear_audit_trail()

        boards: list[BoardResult] = []
        aborted = False

        for board_config in self.config.boards:
            try:
                boards.append(self._process(board_config))
            except CollateError as e:
                logger.error(f"Board '{board_config.display_name}' failed: {e}")
                boards.append(
                    BoardResult(
                        board_id=board_config.id,
                        board_name=board_config.display_name,
                        success=False,
                        error=str(e),
                    )
                )
                if self.policy == BoardErrorPolicy.ABORT:
                    remaining = len(self.config.boards) - len(boards)
                    if remaining:
                        logger.warning(f"Pass aborted; skipping {remaining} remaining board(s)")
                    aborted = True
                    break

        result = PassResult(
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
            boards=boards,
            aborted=aborted,
            api_calls=self.service.get_audit_trail(),
        )

        if result.success:
            logger.info(
                f"Pass complete: {len(boards)} board(s), {result.mutation_count} changes"
            )
        else:
            failed = sum(1 for b in boards if not b.success)
            logger.warning(f"Pass finished with {failed} failed board(s)")

        return result

    def run(self, max_passes: int | None = None) -> PassResult:
        """
        Run passes until `once` is set or `max_passes` is reached.

        Each pass starts one period after the previous one started; if a pass
        overruns the period the next starts immediately. A failed pass does
        not stop the loop.

        Returns:
            The last PassResult
        """
        passes = 0
        while True:
            next_run_at = self._clock() + self.period

            result = self.run_pass()
            passes += 1
            if self.on_pass is not None:
                self.on_pass(result)

            if self.once or (max_passes is not None and passes >= max_passes):
                return result

            sleep_for = max(0.0, next_run_at - self._clock())
            logger.info(f"Sleeping for {sleep_for:.0f}s")
            self._sleep(sleep_for)
