"""
Core application plumbing: context and logging
"""
