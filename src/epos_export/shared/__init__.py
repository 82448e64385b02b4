"""
Shared data model used by the export and harvesting layers.
"""
