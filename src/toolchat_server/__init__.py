"""toolchat-server: Headless FastAPI server for tool-augmented LLM conversations.

This package provides a REST API for chatting with a language model that can
call tools exposed by external tool servers, and for registering those servers.
"""

from toolchat_server.app import create_app

__version__ = "0.1.0"

__all__ = ["create_app", "__version__"]
