"""PromptMate Gateway - HTTP API for prompt rewriting and history"""
__version__ = "0.1.0"
