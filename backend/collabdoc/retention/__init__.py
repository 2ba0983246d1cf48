"""Garbage collection of documents past the retention window.

The sweep runs as a Celery beat task; see ``collabdoc.worker``.
"""
