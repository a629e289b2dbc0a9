"""
Services behind the HTTP surfaces.
"""
