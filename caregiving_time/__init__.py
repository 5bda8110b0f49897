"""Caregiving and travelling time from location ENTER/LEAVE event logs."""

__version__ = "0.1.0"
