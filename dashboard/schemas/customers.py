"""
Pydantic schemas for customer data.

Customers are read-only from the dashboard's point of view.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class CustomerField(BaseModel):
    """Customer option for the invoice form dropdown."""
    id: str = Field(..., description="Customer UUID")
    name: str = Field(..., description="Customer display name")


class CustomerTableRow(BaseModel):
    """
    Row of the customers table with invoice aggregates.

    Totals are in minor currency units (cents).
    """
    id: str = Field(..., description="Customer UUID")
    name: str = Field(..., description="Customer display name")
    email: str = Field(..., description="Customer email")
    image_url: Optional[str] = Field(None, description="Customer avatar path")
    total_invoices: int = Field(..., ge=0, description="Number of invoices")
    total_pending: int = Field(..., ge=0, description="Sum of pending invoice amounts (cents)")
    total_paid: int = Field(..., ge=0, description="Sum of paid invoice amounts (cents)")


class CustomersPageResponse(BaseModel):
    """
    Response for GET /dashboard/customers.
    """
    customers: List[CustomerTableRow] = Field(..., description="Customers matching the search")
    query: str = Field("", description="Search term applied")
    count: int = Field(..., description="Number of customers returned")
