"""Project, sub-project and company masters."""
