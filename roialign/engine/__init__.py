"""Command line engine of RoIAlign."""
