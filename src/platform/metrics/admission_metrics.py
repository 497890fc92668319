from prometheus_client import Counter, Histogram


class AdmissionMetrics:
    """
    Gate admission metrics

    Tracks admission outcomes per event, resolution failures by error code
    and the latency of the admission transition.
    """

    def __init__(self) -> None:
        self.admission_attempts = Counter(
            'admission_attempts_total',
            'Admission attempts by result',
            ['event_id', 'result'],  # result: SUCCESS/ALREADY_USED/NOT_FOUND/DUPLICATE_SCAN/<error code>
        )

        self.admission_duration = Histogram(
            'admission_duration_seconds',
            'Admission transition duration (conditional update + audit log)',
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
        )

        self.resolution_failures = Counter(
            'ticket_resolution_failures_total',
            'Ticket resolution failures by error code',
            ['error_code'],
        )

        self.staff_pin_checks = Counter(
            'staff_pin_checks_total',
            'Staff PIN checks by outcome',
            ['valid'],
        )

    # ========== Helper Methods ==========

    def record_admission(self, *, event_id: str | None, result: str, duration: float) -> None:
        self.admission_attempts.labels(event_id=event_id or 'unknown', result=result).inc()
        self.admission_duration.observe(duration)

    def record_resolution_failure(self, *, error_code: str) -> None:
        self.resolution_failures.labels(error_code=error_code).inc()

    def record_staff_pin_check(self, *, valid: bool) -> None:
        self.staff_pin_checks.labels(valid=str(valid).lower()).inc()


# Global metrics instance
metrics = AdmissionMetrics()
