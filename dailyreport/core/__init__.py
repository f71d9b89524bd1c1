"""Window classification, countdown timer and report status state machine."""
