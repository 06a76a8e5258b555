"""Coaching Center administration core.

Organized by feature modules (students, batches, enrollment, attendance,
announcements, ...) with a thin Flask controller layer over service and
repository layers.
"""
