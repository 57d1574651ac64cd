"""Command-line interface for unity-manifest."""
