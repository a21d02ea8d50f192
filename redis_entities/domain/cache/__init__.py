"""
Cache Domain Module

Value objects, serializers and repository contracts for the cache layer.
"""
