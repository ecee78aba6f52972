"""CLI package for PageStreak"""
from .main import cli

__all__ = ['cli']
