"""
Initializes the 'src' directory as a Python package.

This lets 'main.py' and the test suite import the application package as
'src.tint'.
"""
