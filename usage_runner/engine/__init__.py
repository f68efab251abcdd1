"""Launch and accounting engine."""
