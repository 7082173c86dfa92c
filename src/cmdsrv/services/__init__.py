"""Service layer — command dispatch and handlers returning ServiceResult.

Services may import from domain and protocol layers.
They must never import from server, commands, output, or config.
"""
