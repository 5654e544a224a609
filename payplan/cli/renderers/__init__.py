"""Terminal renderers for CLI output."""
