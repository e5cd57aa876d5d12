"""uploadmissing - Mirror a local directory into an S3 bucket.

Uploads files the bucket is missing and, on request, deletes objects
that no longer exist locally.
"""

__version__ = "0.1.0"
