"""Command-line scripts"""
