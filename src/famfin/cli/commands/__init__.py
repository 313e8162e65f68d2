"""famfin CLI commands."""
