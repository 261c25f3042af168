from sqlalchemy import Column, DateTime, Float, MetaData, String, Table, Text

metadata = MetaData()

transactions = Table(
    "transactions",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("owner", String(64), nullable=False, index=True),
    Column("amount", Float, nullable=False),
    Column("currency", String(3), nullable=False, default="USD"),
    Column("category", String(64)),
    Column("description", Text),
    Column("date", DateTime(timezone=True), nullable=False, index=True),
    Column("raw_text", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)
