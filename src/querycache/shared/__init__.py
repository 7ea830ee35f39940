"""Shared utilities for querycache: errors, logging, constants, types."""
