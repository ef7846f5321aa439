"""Domain layer - provider configuration entities and pure services."""
