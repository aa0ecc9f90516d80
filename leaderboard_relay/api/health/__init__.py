"""Kubernetes liveness and readiness probes."""
