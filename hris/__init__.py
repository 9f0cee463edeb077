"""HRIS REST backend."""
