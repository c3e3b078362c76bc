"""HTTP handlers for the monitoring dashboard."""
