"""Desktop pygame front end."""
