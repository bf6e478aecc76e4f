"""Service layer: settings, text supply, countdown, history and test sessions."""
