"""Support modules for the cronlens command line."""
