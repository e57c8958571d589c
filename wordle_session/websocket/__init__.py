"""
WebSocket Package
"""
