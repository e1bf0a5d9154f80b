"""Attendance Analytics package.

This package is organized by feature modules (attendance, analytics, ...)
with a thin Flask controller layer over service/repository layers.
"""
