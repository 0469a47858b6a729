"""Slash-command types, the command manager and the command parsers."""