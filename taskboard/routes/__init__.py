"""
Routes package for the task board application.

This package contains:
- api: JSON endpoints for users and tasks
- realtime: Socket.IO connection handlers for change notifications
"""
