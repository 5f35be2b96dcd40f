"""Shared data models for the output stage."""

from .datatypes import Bundle, RequestContext, WriteResult

__all__ = ["Bundle", "RequestContext", "WriteResult"]
