"""
Tools module: execution backends.
"""
