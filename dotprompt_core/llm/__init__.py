"""Adapters from prompt files to OpenAI chat-completion requests.

@public
"""

from .chat import to_chat_messages, to_completion_options

__all__ = ["to_chat_messages", "to_completion_options"]
