"""Shiftlink HTTP host package.

Provides the FastAPI application factory, typed dependencies, forward job
services, the one-shot forward CLI, and models with explicit dependency
injection.
"""
