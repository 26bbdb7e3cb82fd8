"""
API Serializers for Request/Response handling
"""
