"""Command-line interface for merge-queue-bot."""
