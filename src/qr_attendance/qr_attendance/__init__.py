"""QR Attendance package.

This package is organized by feature modules (tokens, schedules, attendance,
capture, stats, ...) with a thin Flask controller layer and service/repository
layers underneath.
"""
