"""CSP portal operations that feed and read the fraud engine."""
