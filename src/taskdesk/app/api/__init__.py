"""HTTP surface of the TaskDesk service."""
