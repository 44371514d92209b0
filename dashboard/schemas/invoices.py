"""
Pydantic schemas for invoice endpoints.

These models define the request/response contracts for the invoice pages and
the create / update / delete form actions.
"""

from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from dashboard.schemas.customers import CustomerField

InvoiceStatus = Literal["pending", "paid"]


# --- Form action models ---

class InvoiceFormRequest(BaseModel):
    """
    Raw fields submitted by the create / edit invoice forms.

    Values are deliberately loose (everything optional, amount may arrive as
    text or number): the form validator decides what is acceptable and reports
    every failing field at once. Unknown fields such as id or date are ignored.
    """
    customer_id: Optional[str] = Field(
        None,
        alias="customerId",
        description="UUID of the selected customer",
        examples=["3958dc9e-712f-4377-85e9-fec4b6a6442a"]
    )
    amount: Optional[Union[str, int, float]] = Field(
        None,
        description="Amount in major currency units as typed by the user",
        examples=["120.50"]
    )
    status: Optional[str] = Field(
        None,
        description="Invoice status ('pending' or 'paid')",
        examples=["pending"]
    )

    model_config = {
        "populate_by_name": True,
        "extra": "ignore"
    }

    def to_form_data(self) -> Dict[str, object]:
        """Return the submitted values keyed by form field name."""
        return self.model_dump(by_alias=True)


class FormState(BaseModel):
    """
    Result of a form action that did not redirect.

    Carries field-level error messages (for inline display) and/or a single
    top-level message. Created fresh for every submission, never persisted.
    """
    errors: Optional[Dict[str, List[str]]] = Field(
        None,
        description="Field name -> ordered list of human-readable error messages",
        examples=[{"amount": ["Please enter an amount greater than $0."]}]
    )
    message: Optional[str] = Field(
        None,
        description="Top-level message for the form",
        examples=["Missing Fields. Failed to Create Invoice."]
    )


# --- Read models ---

class InvoiceForm(BaseModel):
    """
    Invoice as loaded into the edit form.

    amount is expressed in major units (the stored cents divided by 100).
    """
    id: str = Field(..., description="Invoice UUID")
    customer_id: str = Field(..., description="Customer UUID")
    amount: float = Field(..., description="Amount in major currency units")
    status: InvoiceStatus = Field(..., description="Invoice status")


class InvoiceListItem(BaseModel):
    """
    Row of the invoices table (invoice joined with its customer).

    amount is in minor units, exactly as stored.
    """
    id: str = Field(..., description="Invoice UUID")
    customer_id: str = Field(..., description="Customer UUID")
    name: str = Field(..., description="Customer name")
    email: str = Field(..., description="Customer email")
    image_url: Optional[str] = Field(None, description="Customer avatar path")
    date: str = Field(..., description="Creation date (YYYY-MM-DD)")
    amount: int = Field(..., description="Amount in minor currency units (cents)")
    status: InvoiceStatus = Field(..., description="Invoice status")


# --- Page models ---

class InvoicesPageResponse(BaseModel):
    """
    Response for GET /dashboard/invoices - searchable, paginated table.
    """
    invoices: List[InvoiceListItem] = Field(..., description="Invoices on the requested page")
    query: str = Field("", description="Search term applied")
    current_page: int = Field(..., ge=1, description="Page returned (1-based)")
    total_pages: int = Field(..., ge=0, description="Number of pages for the search term")


class CreateInvoicePageResponse(BaseModel):
    """
    Response for GET /dashboard/invoices/create - data for the empty form.
    """
    customers: List[CustomerField] = Field(..., description="Customers for the dropdown")


class EditInvoicePageResponse(BaseModel):
    """
    Response for GET /dashboard/invoices/{invoice_id}/edit - prefilled form.
    """
    invoice: InvoiceForm = Field(..., description="Invoice being edited")
    customers: List[CustomerField] = Field(..., description="Customers for the dropdown")
