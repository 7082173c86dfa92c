"""Protocol layer — request/response envelopes and their byte codec.

Depends on domain and pydantic only. Nothing here performs I/O.
"""
