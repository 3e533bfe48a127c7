"""Observability: structured logging and metrics.

Uses structlog for logging and Prometheus for metrics.
"""
