"""Front desk agent service."""
