"""
metrics.py

Provides a simple centralized tracker for service calls, retries and rejected replies.
"""

from time import time


class MetricsTracker:
    """
    Tracks key operational metrics for the analysis client.

    A global instance `metrics_tracker` is provided for convenience. The
    counters are observability only and never influence control flow.

    Attributes:
        api_calls (int): Count of successful service calls.
        total_tokens (int): Total number of tokens reported by the provider.
        retries (int): Count of retry delays scheduled.
        validation_failures (int): Count of replies rejected by the parser.
        errors (int): Count of terminal errors.
        start_time (float | None): Timestamp when the timer started.
        end_time (float | None): Timestamp when the timer stopped.
    """

    def __init__(self):
        self.reset()

    def reset(self):
        """Resets all tracked metrics to their initial state."""
        self.api_calls: int = 0
        self.total_tokens: int = 0
        self.retries: int = 0
        self.validation_failures: int = 0
        self.errors: int = 0
        self.start_time: float | None = None
        self.end_time: float | None = None

    def increment_api_calls(self, count: int = 1):
        self.api_calls += count

    def add_tokens(self, count: int):
        """
        Adds to the total token count, ignoring values that are not non-negative ints.

        Args:
            count (int): The number of tokens to add.
        """
        if isinstance(count, int) and not isinstance(count, bool) and count >= 0:
            self.total_tokens += count

    def increment_retries(self, count: int = 1):
        self.retries += count

    def increment_validation_failures(self, count: int = 1):
        self.validation_failures += count

    def increment_errors(self, count: int = 1):
        self.errors += count

    def start_timer(self):
        self.start_time = time()

    def stop_timer(self):
        self.end_time = time()

    def get_summary(self) -> dict:
        """
        Returns a dictionary summarizing the tracked metrics.

        Returns:
            dict: Counters plus 'duration_seconds' when the timer was started and stopped.
        """
        duration = None
        if self.start_time and self.end_time:
            duration = self.end_time - self.start_time

        return {
            "total_api_calls": self.api_calls,
            "total_tokens_used": self.total_tokens,
            "total_retries": self.retries,
            "total_validation_failures": self.validation_failures,
            "total_errors": self.errors,
            "duration_seconds": duration,
        }


# Global instance
metrics_tracker = MetricsTracker()
