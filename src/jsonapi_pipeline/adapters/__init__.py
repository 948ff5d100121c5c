"""Storage adapter interface consumed by the query dispatcher."""

from jsonapi_pipeline.adapters.base import Adapter

__all__ = ["Adapter"]
