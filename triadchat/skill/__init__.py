"""Workspace skill discovery and time-limited skill execution."""