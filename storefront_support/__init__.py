"""Customer-support chat agent for the storefront's messaging channel."""
