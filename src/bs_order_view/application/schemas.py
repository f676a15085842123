"""Pydantic schemas for order view maintenance results."""

from pydantic import BaseModel


class RebuildOrderViewResult(BaseModel):
    orders: int
    batches: int
