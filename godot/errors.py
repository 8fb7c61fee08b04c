"""
Exceptions raised by the Godot connection layer.
"""


class GodotConnectionError(RuntimeError):
    """No addon connection is available, or it dropped while a command was pending."""
