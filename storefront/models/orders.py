"""Cart submission forms"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, EmailStr, Field, TypeAdapter


class OrderProduct(BaseModel):
    """One submitted cart line; the client's price is never part of it"""
    document_id: str = Field(alias="documentId", min_length=1)
    quantity: int

    class Config:
        populate_by_name = True


class LoggedInOrderForm(BaseModel):
    status: Literal["logged-in"]
    products: list[OrderProduct] = Field(min_length=1)


class LoggedOutOrderForm(BaseModel):
    status: Literal["logged-out"]
    email: EmailStr
    products: list[OrderProduct] = Field(min_length=1)


OrderForm = Annotated[
    Union[LoggedInOrderForm, LoggedOutOrderForm],
    Field(discriminator="status"),
]

order_form_adapter = TypeAdapter(OrderForm)
