"""
sqlbatch – apply a SQL script to a database one statement at a time.
"""
__version__ = "0.1.0"
