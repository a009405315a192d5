"""
Template parsing module.
Compiles `@` reference syntax into Templates.
"""

from .parser import Parser

__all__ = ['Parser']
