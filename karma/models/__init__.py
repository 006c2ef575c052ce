"""
Value objects passed between the karma engine and its host.

These dataclasses are immutable and carry only data; rendering and
persistence happen elsewhere.
"""

from .action import Action
from .link_outcome import LinkOutcome
from .message import Message
from .modify_result import ModifyResult
from .user import User

__all__ = ["Action", "LinkOutcome", "Message", "ModifyResult", "User"]
