"""
Command line front-end.
"""
