"""Recipe Box web application."""
