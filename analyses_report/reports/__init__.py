"""Report parsing, fetching and selection."""
