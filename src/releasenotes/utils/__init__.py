"""Shared helpers for the release notes mailer."""
