"""Input handling and run orchestration."""
