"""Browser-driven UI tests for the vaults web application."""
