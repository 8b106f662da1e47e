# Infrastructure layer - database, external services
"""
Infrastructure layer contains:
- Database repositories
- External service clients (Discord bot, identity service)

This layer depends on nothing above it.
"""
