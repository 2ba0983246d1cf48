"""Prometheus metrics for the collaboration backend.

Defines and exposes operational metrics for monitoring and alerting.
"""

from prometheus_client import Counter, Histogram

# Document lifecycle metrics
documents_created_total = Counter(
    "collabdoc_documents_created_total",
    "Total number of documents created",
    ["owned"]  # owned: true|false
)

documents_deleted_total = Counter(
    "collabdoc_documents_deleted_total",
    "Total number of documents deleted",
    ["reason"]  # reason: explicit|expired
)

# Image metrics
images_uploaded_total = Counter(
    "collabdoc_images_uploaded_total",
    "Total number of images uploaded",
)

image_uploads_rejected_total = Counter(
    "collabdoc_image_uploads_rejected_total",
    "Image uploads rejected before storage",
    ["reason"]  # reason: too_large|unsupported_type|storage_error
)

storage_errors_total = Counter(
    "collabdoc_storage_errors_total",
    "Object storage operations that failed",
    ["operation"]  # operation: put|get|delete
)

# Garbage collection metrics
retention_sweep_duration_seconds = Histogram(
    "collabdoc_retention_sweep_duration_seconds",
    "Time spent on one retention sweep in seconds",
    buckets=[0.1, 0.5, 1.0, 5.0, 15.0, 60.0, 300.0, 900.0]
)
