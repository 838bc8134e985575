"""Command-line interface for hashflake"""
