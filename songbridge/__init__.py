"""
SongBridge: asynchronous music generation bridge.
"""
