"""Domain layer — command names, statuses, and operation enums.

This layer depends only on stdlib and pydantic.
It must never import from protocol, services, server, commands, or config.
"""
