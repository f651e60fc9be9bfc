"""Route modules registered on the dashboard blueprint by dashboard.load_modules()."""
