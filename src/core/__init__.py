"""Core domain package for menubot.

Core contains the reply catalog, routing, and rendering logic without any
Telegram or console-specific code, keeping the conversation flow portable.
"""
