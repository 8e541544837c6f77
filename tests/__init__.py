"""
Test suite for the task board service.

This package contains:
- unit/: Service, model and configuration tests without HTTP round-trips
- integration/: API, realtime and resilience tests through the Flask test client
- fakes.py: Recording broadcaster and in-memory store doubles
"""
