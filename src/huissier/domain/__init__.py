"""
Domain layer.
"""
