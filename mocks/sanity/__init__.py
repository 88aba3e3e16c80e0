"""
Mock Sanity query API.
"""
