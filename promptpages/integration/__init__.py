"""
Prompt Pages Integration - Adapters for web frameworks.

Usage:
    from promptpages.integration.fastapi import create_app
"""
