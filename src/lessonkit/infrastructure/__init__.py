"""Infrastructure: configuration and log file locations."""
