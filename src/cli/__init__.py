"""Command line interface for inspecting span cache directories."""
