"""CLI command modules for lessonkit."""
