"""Realtime collaboration layer (Socket.IO).

Clients join one room per project and every board change they emit is
relayed to the other collaborators in that room.
"""
