"""Jira data access and cycle time report services."""
