"""
Application layer.
"""
