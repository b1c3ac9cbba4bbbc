"""Static configuration for the dashboard."""
