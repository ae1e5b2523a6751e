"""Shared type definitions for whisker."""

from collections.abc import Callable
from typing import Any, Literal, TypeAlias

# Name of a notification center event (e.g. "rep_written")
EventName: TypeAlias = str

# Identity under which a callback is registered; usually the listener itself
SubscriberKey: TypeAlias = object

# Callback invoked with the event payload, positionally
EventCallback: TypeAlias = Callable[..., Any]

# Importance of a file-action log line
LogLevel: TypeAlias = Literal["high", "low"]

# Verbosity of the file logger
LoggerLevel: TypeAlias = Literal["high", "low", "off"]

# What happened to an output file
FileAction: TypeAlias = Literal["create", "update", "identical", "skip", "delete"]

# A compile pass body: runs the external compiler, may raise
CompilePass: TypeAlias = Callable[[], Any]
