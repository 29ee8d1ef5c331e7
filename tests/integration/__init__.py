"""
Integration tests for the extraction pipeline.

These tests use mocked AWS services to run the upload and job status
handlers back to back over real queue and bucket state.
"""
