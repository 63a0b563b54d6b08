"""Request bodies for the API."""
