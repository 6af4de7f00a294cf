"""Database models for the warehouse inventory."""

from typing import Optional

from sqlmodel import Field, SQLModel


class Floor(SQLModel, table=True):
    """Warehouse level with a left and a right storage area."""

    __tablename__ = "floors"

    floor_number: int = Field(
        primary_key=True, sa_column_kwargs={"autoincrement": False}
    )
    left_columns: int
    right_columns: int


class Product(SQLModel, table=True):
    """Quantity of one product model stored at a floor position.

    ``floor_number`` is a plain column; the floor is not enforced by a
    foreign key.
    """

    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)
    model: str = Field(index=True)
    quantity: int
    floor_number: int = Field(index=True)
    position: str = Field(index=True)


class Pallet(SQLModel, table=True):
    """Reserved table for individual pallets; not used by any operation."""

    __tablename__ = "pallets"

    id: Optional[int] = Field(default=None, primary_key=True)
    floor_number: int
    position: str
    column: int
    row: int
    side: str
