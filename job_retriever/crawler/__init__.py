"""Browser session management and page fetchers."""
