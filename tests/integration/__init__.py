"""
API test package for the task board.

Tests use the Flask and Flask-SocketIO test clients and demonstrate:
- CRUD operation testing
- Input validation testing
- Change notification counting
- Error handling under store and broadcast failures
"""
