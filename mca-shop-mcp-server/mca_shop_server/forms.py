"""Form state and required-field validation for checkout and the admin dashboard."""

import logging
import mimetypes
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .cart import Cart
from .mca_client import UploadFile
from .models import PRODUCT_CATEGORIES, HeroContent, OrderRequest

logger = logging.getLogger(__name__)


def detect_media_type(filename: str, content_type: Optional[str] = None) -> Optional[str]:
    """Return "image" or "video" for a file, or None if it is neither."""
    content_type = content_type or mimetypes.guess_type(filename)[0] or ""
    if content_type.startswith("video/"):
        return "video"
    if content_type.startswith("image/"):
        return "image"
    return None


def load_upload(path: str) -> UploadFile:
    """Read a local file into an httpx multipart upload tuple."""
    file_path = Path(path)
    content_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
    return (file_path.name, file_path.read_bytes(), content_type)


class CheckoutForm(BaseModel):
    """Customer details collected at checkout. Every field is required."""

    client_name: str = ""
    wilaya: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""

    def missing_fields(self) -> list[str]:
        return [name for name, value in self.model_dump().items() if not value.strip()]

    def validate_required(self) -> None:
        missing = self.missing_fields()
        if missing:
            raise ValueError(f"Please fill in the required fields: {', '.join(missing)}")

    def build_orders(self, cart: Cart) -> list[OrderRequest]:
        """One order per cart line, with the product fields denormalized into it."""
        return [
            OrderRequest(
                product_id=item.id,
                product_name=item.name,
                product_price=item.price,
                product_photos=item.photos,
                client_name=self.client_name,
                wilaya=self.wilaya,
                address=self.address,
                phone=self.phone,
                email=self.email,
                color=item.color,
                size=item.size,
                quantity=item.quantity,
            )
            for item in cart
        ]


class ProductForm(BaseModel):
    """Admin "Add Product" form."""

    name: str = ""
    description: str = ""
    price: str = ""
    category: str = ""
    colors: list[str] = Field(default_factory=list)
    sizes: list[str] = Field(default_factory=list)
    photos: list[UploadFile] = Field(default_factory=list)

    def add_color(self, color: str) -> bool:
        color = color.strip()
        if not color or color in self.colors:
            return False
        self.colors.append(color)
        return True

    def remove_color(self, color: str) -> None:
        self.colors = [c for c in self.colors if c != color]

    def add_size(self, size: str) -> bool:
        size = size.strip()
        if not size or size in self.sizes:
            return False
        self.sizes.append(size)
        return True

    def remove_size(self, size: str) -> None:
        self.sizes = [s for s in self.sizes if s != size]

    def set_photos(self, photos: list[UploadFile]) -> int:
        """
        Keep only image and video files.

        Returns:
            Number of files that were rejected
        """
        valid = [p for p in photos if detect_media_type(p[0], p[2])]
        self.photos = valid
        return len(photos) - len(valid)

    def validate_required(self) -> None:
        if not (self.name and self.description and self.price and self.category):
            raise ValueError("Please fill in all required fields")
        if not self.photos:
            raise ValueError("Please select at least one photo")
        if self.category not in PRODUCT_CATEGORIES:
            raise ValueError(f"Unknown category: {self.category}")
        try:
            price = Decimal(self.price.strip())
        except InvalidOperation:
            raise ValueError(f"Invalid price: {self.price}") from None
        if not price.is_finite() or price < 0:
            raise ValueError(f"Invalid price: {self.price}")

    def to_fields(self) -> dict[str, str]:
        return {
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "colors": ",".join(self.colors),
            "sizes": ",".join(self.sizes),
        }


class HeroForm(BaseModel):
    """Admin hero-slide form, used both to create and to edit a slide."""

    title: str = ""
    subtitle: str = ""
    button_text: str = "Shop Now"
    theme: str = "light"
    order: int = 0
    is_active: bool = True
    media: Optional[UploadFile] = None
    media_type: str = ""
    editing_id: Optional[str] = None

    @classmethod
    def from_content(cls, content: HeroContent) -> "HeroForm":
        """Prefill the form to edit an existing slide; the media is kept unless replaced."""
        return cls(
            title=content.title,
            subtitle=content.subtitle,
            button_text=content.button_text,
            theme=content.theme,
            order=content.order,
            is_active=content.is_active,
            media_type=content.media_type or "",
            editing_id=content.id,
        )

    def set_media(self, media: UploadFile) -> None:
        media_type = detect_media_type(media[0], media[2])
        if media_type is None:
            raise ValueError("Please select an image or video file")
        self.media = media
        self.media_type = media_type

    def validate_required(self) -> None:
        if not self.title.strip():
            raise ValueError("Title is required")
        if not self.subtitle.strip():
            raise ValueError("Subtitle is required")
        if not self.editing_id:
            if not self.media:
                raise ValueError("Please select a media file")
            if not self.media_type:
                raise ValueError("Media type could not be determined")
        if self.theme not in ("light", "dark"):
            raise ValueError(f"Unknown theme: {self.theme}")

    def to_fields(self) -> dict[str, str]:
        return {
            "title": self.title.strip(),
            "subtitle": self.subtitle.strip(),
            "buttonText": self.button_text,
            "theme": self.theme,
            "order": str(self.order),
            "isActive": "true" if self.is_active else "false",
            "mediaType": self.media_type,
        }
