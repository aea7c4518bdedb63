"""
WebSocket transport for the AudioShare relay.

The server subpackage adapts websockets connections to the core
Connection interface and runs the relay endpoint.
"""
