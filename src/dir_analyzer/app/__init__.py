"""Command-line presentation: CLI, renderers, progress bar and watch mode."""
