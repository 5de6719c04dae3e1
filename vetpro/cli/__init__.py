"""
Command-line interface for the VetPro care scheduling tools.
"""
