"""Shared utilities for merge-queue-bot."""
