"""Third-party system integrations."""
