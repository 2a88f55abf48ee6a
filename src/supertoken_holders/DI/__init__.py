# -*- coding: utf-8 -*-
"""Dependency injection."""

from supertoken_holders.DI.container import Container

__all__ = ["Container"]
