"""
Infrastructure Package
======================

Provides abstraction layers for cross-cutting dependencies.

Modules:
    - events: In-process event bus used to fan workflow events out to subscribers
    - payments: Payment provider abstraction (simulated gateway)
    - container: Service locator for domain services and providers
"""
