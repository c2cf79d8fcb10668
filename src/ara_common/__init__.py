"""Shared helpers: request context, error envelope, telemetry and tool instrumentation."""
