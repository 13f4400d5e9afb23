"""İndirim kaydı: yüzde/sabit indirim, hedefleme, geçerlilik aralığı ve kullanım sayacı."""
from datetime import datetime

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class Discount(SQLModel, table=True):
    """Admin tarafından oluşturulur; değerlendirme motoru sadece okur."""

    id: int | None = Field(default=None, primary_key=True)
    # Sadece otomatik indirimlerde boş olabilir; büyük/küçük harf duyarlı
    code: str | None = Field(default=None, unique=True, index=True, max_length=64)
    name: str = Field(default="", max_length=255)
    description: str | None = Field(default=None)
    discount_type: str = Field(max_length=16)  # "percentage" | "fixed"
    amount: float  # percentage: 0-100, fixed: para birimi
    max_discount_amount: float | None = Field(default=None)  # yüzde hesabından sonra tavan
    target_type: str = Field(default="all", max_length=16)  # all | products | categories | customers
    product_ids: list[str] | None = Field(default=None, sa_column=Column(JSON))
    category_names: list[str] | None = Field(default=None, sa_column=Column(JSON))
    customer_ids: list[str] | None = Field(default=None, sa_column=Column(JSON))
    min_order_amount: float | None = Field(default=None)
    is_first_purchase_only: bool = False
    is_automatic: bool = Field(default=False, index=True)
    usage_limit: int | None = Field(default=None)  # null = sınırsız
    usage_count: int = Field(default=0)
    status: str = Field(default="active", max_length=16)  # active | inactive | expired
    priority: int | None = Field(default=None)
    start_date: datetime
    end_date: datetime
    created_at: datetime | None = Field(default_factory=datetime.utcnow)
    updated_at: datetime | None = Field(default=None)
