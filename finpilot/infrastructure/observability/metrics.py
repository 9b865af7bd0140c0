"""Prometheus metrics for monitoring readiness outcomes, risk verdicts, and summary service health"""

from prometheus_client import Counter, Histogram

# Analysis metrics
analysis_counter = Counter(
    "finpilot_analysis_total",
    "Total financial readiness analyses",
    ["classification"],  # Strong | Moderate | Weak | High Risk
)

overall_risk_counter = Counter(
    "finpilot_overall_risk_total",
    "Rejection-risk verdicts issued",
    ["level"],  # High | Medium | Low
)

readiness_score_histogram = Histogram(
    "finpilot_readiness_score",
    "Distribution of readiness scores",
    buckets=[15, 25, 40, 50, 60, 70, 80, 90, 100],
)

loan_letter_counter = Counter(
    "finpilot_loan_letters_total",
    "Loan application letters generated",
    ["deficit"],  # true | false
)

# Summary service metrics
summary_latency_histogram = Histogram(
    "summary_latency_seconds",
    "Remote summary service response time",
    buckets=[0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0],
)

summary_fallback_counter = Counter(
    "finpilot_summary_fallback_total",
    "Analyses served with the local summary instead of the remote one",
    ["reason"],  # disabled | error
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_analysis(classification: str, score: int, overall_risk_level: str) -> None:
    """Record analysis outcome for monitoring readiness distribution"""
    analysis_counter.labels(classification=classification).inc()
    overall_risk_counter.labels(level=overall_risk_level).inc()
    readiness_score_histogram.observe(score)


def record_loan_letter(is_deficit: bool) -> None:
    loan_letter_counter.labels(deficit="true" if is_deficit else "false").inc()


def record_summary_fallback(provider_configured: bool) -> None:
    summary_fallback_counter.labels(reason="error" if provider_configured else "disabled").inc()
