"""
Error classification services.

- error_patterns_service: the ordered pattern table and PatternRegistry
- error_classification_service: ErrorClassifier and convenience functions
- alerting_service: the alert gate
- error_metrics_service: per-kind counters and threshold escalation
"""
