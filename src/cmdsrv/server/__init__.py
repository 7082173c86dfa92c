"""Transport layer — asyncio TCP server and client.

Owns sockets and framing; everything else is delegated to the codec and
the dispatcher.
"""
