"""Core infrastructure: configuration, database and i18n."""
