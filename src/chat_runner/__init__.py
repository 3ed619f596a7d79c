"""Chat-driven Playwright plan runner."""
