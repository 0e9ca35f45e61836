"""Fitness Buddy client: backend API client, companion service and dashboard UI."""
