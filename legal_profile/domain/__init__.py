"""Domain layer: validation rules, repository protocols and typed errors."""
