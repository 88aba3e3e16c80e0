"""
Local stand-ins for upstream services, used in development and integration tests.
"""
