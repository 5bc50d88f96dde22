from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class PurchaseType(str, Enum):
    EXISTING = "existing"
    NEW = "new"


def _parse_date(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        return raw
    text = str(raw).strip()
    # JSON dates written by browsers end with "Z"
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _format_date(value: datetime) -> str:
    return value.isoformat(timespec="seconds")


@dataclass(frozen=True)
class User:
    id: str
    email: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "email": self.email, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(id=str(data["id"]), email=str(data.get("email", "")), name=str(data.get("name", "")))


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "color": self.color}

    @classmethod
    def from_dict(cls, data: dict) -> "Category":
        return cls(id=str(data["id"]), name=str(data.get("name", "")), color=str(data.get("color", "")))


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    description: str
    category_id: str
    stock: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "categoryId": self.category_id,
            "stock": self.stock,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Product":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            category_id=str(data.get("categoryId", "")),
            stock=int(data.get("stock", 0)),
        )


@dataclass(frozen=True)
class NewProductData:
    name: str
    description: str
    category_id: str

    def to_dict(self) -> dict:
        return {"name": self.name, "description": self.description, "categoryId": self.category_id}

    @classmethod
    def from_dict(cls, data: dict) -> "NewProductData":
        return cls(
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            category_id=str(data.get("categoryId", "")),
        )


@dataclass(frozen=True)
class Purchase:
    """A stock purchase.

    ``product_name`` is a snapshot taken when the purchase is recorded; later
    product renames do not touch it. ``new_product_data`` is set only for
    ``PurchaseType.NEW`` purchases, which create their product on insertion.
    """

    id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    total_price: float
    date: datetime
    type: PurchaseType = PurchaseType.EXISTING
    new_product_data: Optional[NewProductData] = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "productId": self.product_id,
            "productName": self.product_name,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "totalPrice": self.total_price,
            "date": _format_date(self.date),
            "type": self.type.value,
        }
        if self.new_product_data is not None:
            data["newProductData"] = self.new_product_data.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Purchase":
        npd = data.get("newProductData")
        return cls(
            id=str(data["id"]),
            product_id=str(data.get("productId", "")),
            product_name=str(data.get("productName", "")),
            quantity=int(data.get("quantity", 0)),
            unit_price=float(data.get("unitPrice", 0.0)),
            total_price=float(data.get("totalPrice", 0.0)),
            date=_parse_date(data["date"]),
            type=PurchaseType(data.get("type", PurchaseType.EXISTING.value)),
            new_product_data=NewProductData.from_dict(npd) if npd else None,
        )


@dataclass(frozen=True)
class Sale:
    id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    total_price: float
    date: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productId": self.product_id,
            "productName": self.product_name,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "totalPrice": self.total_price,
            "date": _format_date(self.date),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Sale":
        return cls(
            id=str(data["id"]),
            product_id=str(data.get("productId", "")),
            product_name=str(data.get("productName", "")),
            quantity=int(data.get("quantity", 0)),
            unit_price=float(data.get("unitPrice", 0.0)),
            total_price=float(data.get("totalPrice", 0.0)),
            date=_parse_date(data["date"]),
        )
