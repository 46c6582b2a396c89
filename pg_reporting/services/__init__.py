"""
Service layer.

- analytics: report periods, aggregation, trends, cache and orchestration
- background: scheduled cache jobs
"""
