"""Core run model, progress tracking and run orchestration."""
