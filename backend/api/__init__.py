"""
HTTP and WebSocket API serving the outbreak game engine.
"""
