"""Bounded contexts of the resume tailor client."""
