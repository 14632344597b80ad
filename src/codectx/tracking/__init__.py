"""Index tracking engine: scanning, change detection, sync, validation, cleanup."""
