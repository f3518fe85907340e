"""
Utility modules: logging setup and input validation.
"""
