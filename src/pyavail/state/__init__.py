"""State layer.

Policy and capability decisions plus the store that owns the last known
availability of every tracked endpoint.
"""
