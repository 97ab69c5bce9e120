"""ChangeLens CLI commands."""
