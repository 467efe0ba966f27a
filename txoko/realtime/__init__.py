"""Realtime infrastructure (Socket.IO).

This package holds the shared socket server so notifications, chat and future
features publish through one instance.
"""
