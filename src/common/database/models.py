from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Text, Index
from .database import Base
from datetime import datetime

# --- Site Registry (owned by the device registry, read here) ---

class SiteDB(Base):
    __tablename__ = "sites"

    site_id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    location = Column(String, nullable=False)
    road1_name = Column(String, nullable=False, default="")
    road2_name = Column(String, nullable=False, default="")
    last_seen_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

# --- Raw Readings (owned by ingestion) ---

class ReadingDB(Base):
    __tablename__ = "device_readings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    site_id = Column(String, ForeignKey("sites.site_id", ondelete="CASCADE"), nullable=False)
    road1_jam_percent = Column(Integer, nullable=False)
    road2_jam_percent = Column(Integer, nullable=False)
    batch_id = Column(String, nullable=True, index=True)
    timestamp = Column(DateTime, nullable=False)  # Naive, reference time zone

    __table_args__ = (
        Index("idx_device_readings_site_timestamp", "site_id", "timestamp"),
    )

# --- Derived Data ---

class HalfHourAverageDB(Base):
    __tablename__ = "half_hour_averages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    site_id = Column(String, ForeignKey("sites.site_id", ondelete="CASCADE"), nullable=False)
    timestamp = Column(DateTime, nullable=False)  # Start of the slot
    half_hour_index = Column(Integer, nullable=False, index=True)  # 0-47
    average_value = Column(Integer, nullable=False)  # Jam percentage 0-100
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_half_hour_averages_site_timestamp", "site_id", "timestamp"),
    )

class PredictionDB(Base):
    __tablename__ = "predictions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    site_id = Column(String, ForeignKey("sites.site_id", ondelete="CASCADE"), nullable=False)
    prediction_date = Column(Date, nullable=False, index=True)
    predicted_values = Column(Text, nullable=False)  # JSON array of 48 jam percentages
    generated_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("idx_predictions_site_date", "site_id", "prediction_date"),
    )
