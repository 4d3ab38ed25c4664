"""
Completion Relay

Delivers the outcome of one capture session exactly once.

Several paths can try to report the same session (process exit, fallback
ladder exhaustion, force-kill deadline, stop during a retry backoff). The
first fire() wins; every later call is a no-op. A successful recording is
then handed to the timeline integration on a background thread, and the
listeners are called with the final CompletionResult.
"""

import logging
import threading
from typing import Callable, List, Optional

from recording.models.capture_models import CompletionResult
from timeline.interfaces.timeline_interface import TimelineInterface, TimelineResult

CompletionCallback = Callable[[CompletionResult], None]


class CompletionRelay:
    """
    Single-fire completion guard for one capture session.

    Usage:
        relay = CompletionRelay(timeline, listeners=[print])
        relay.fire(CompletionResult(success=True, output_path=path))
        relay.fire(CompletionResult(success=False))   # ignored
        result = relay.wait(timeout=5.0)
    """

    def __init__(
        self,
        timeline: Optional[TimelineInterface] = None,
        listeners: Optional[List[CompletionCallback]] = None,
        name: str = "session",
    ):
        """
        Initialize relay.

        Args:
            timeline: Integration that receives successful recordings
                      (None = skip the timeline step)
            listeners: Callbacks for the final result. The list is read at
                       delivery time, so callbacks added later still fire.
            name: Label for logs and the delivery thread
        """
        self.logger = logging.getLogger(__name__)
        self.timeline = timeline
        self.listeners = listeners if listeners is not None else []
        self.name = name

        self._lock = threading.Lock()
        self._fired = False
        self._delivered = threading.Event()
        self._result: Optional[CompletionResult] = None

    @property
    def has_fired(self) -> bool:
        return self._fired

    @property
    def result(self) -> Optional[CompletionResult]:
        """Delivered result (None until delivery finished)"""
        return self._result

    def fire(self, result: CompletionResult) -> bool:
        """
        Report the session outcome.

        Returns immediately; timeline work and listeners run on a
        background thread.

        Args:
            result: Outcome of the session

        Returns:
            True if this call won the latch, False if the session was
            already reported
        """
        with self._lock:
            if self._fired:
                self.logger.debug(f"Completion for {self.name} already fired, ignoring")
                return False
            self._fired = True

        if result.success:
            self.logger.info(f"Recording completed: {result.output_path}")
        else:
            self.logger.error(f"Recording failed: {result.error}")

        threading.Thread(
            target=self._deliver,
            args=(result,),
            daemon=True,
            name=f"CompletionRelay-{self.name}",
        ).start()
        return True

    def wait(self, timeout: Optional[float] = None) -> Optional[CompletionResult]:
        """
        Block until the result was delivered to every listener.

        Returns:
            The delivered result, or None on timeout
        """
        if not self._delivered.wait(timeout):
            return None
        return self._result

    def _deliver(self, result: CompletionResult) -> None:
        try:
            if result.success and result.output_path and self.timeline is not None:
                result = result.with_timeline_result(self._add_to_timeline(str(result.output_path)))

            self._result = result
            for callback in list(self.listeners):
                self._trigger_completion_callback(callback, result)
        finally:
            if self._result is None:
                self._result = result
            self._delivered.set()

    def _add_to_timeline(self, file_path: str) -> TimelineResult:
        """Run the integration; its failures never escape."""
        try:
            timeline_result = self.timeline.add_recording_to_timeline(file_path)
        except Exception as e:
            self.logger.error(f"Timeline integration failed: {e}", exc_info=True)
            return TimelineResult(success=False, error=str(e))

        if timeline_result.success:
            self.logger.info(f"Added to timeline: {timeline_result.timeline_name}")
        else:
            self.logger.warning(f"Could not add to timeline: {timeline_result.error}")
        return timeline_result

    def _trigger_completion_callback(self, callback: CompletionCallback, result: CompletionResult) -> None:
        """Trigger one completion listener"""
        try:
            callback(result)
        except Exception as e:
            self.logger.error(f"Error in completion callback: {e}", exc_info=True)
