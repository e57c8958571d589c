"""
Controllers Package
"""
