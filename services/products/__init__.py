"""
Sample product API served by the runtime.
"""
