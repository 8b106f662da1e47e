"""Application layer - business logic services.

This layer contains application services that orchestrate repository operations.
Services are independent of HTTP routing and can be tested in isolation.
"""
