from sqlfragment.utils import logging

__all__ = ("logging",)
