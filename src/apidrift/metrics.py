from prometheus_client import Counter, Histogram

comparisons_total = Counter(
    "apidrift_comparisons_total",
    "Number of spec comparisons run",
    ["change_level"]
)

spec_parse_failures_total = Counter(
    "apidrift_spec_parse_failures_total",
    "Number of failed API spec parsing attempts"
)

violations_total = Counter(
    "apidrift_violations_total",
    "Number of rule violations detected",
    ["scope", "change_level"]
)

comparison_duration_seconds = Histogram(
    "apidrift_comparison_duration_seconds",
    "Time taken to compare two specs",
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0]
)
