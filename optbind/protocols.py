# Optbind Option Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines structural protocols for Optbind option records.

These runtime-checkable `Protocol` classes specify the interfaces the parser
relies on without requiring explicit base classes.

Protocols:
- SupportsValidate: An option record with a `validate()` hook, called once after
  the record is fully populated.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SupportsValidate(Protocol):
    def validate(self) -> None: ...
