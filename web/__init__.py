"""
Web interface for the property wizard.
"""
