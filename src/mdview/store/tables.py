"""Database table definitions for persisted viewer settings"""

from datetime import datetime
from typing import Any

from sqlalchemy import Column, DateTime, JSON
from sqlmodel import Field, SQLModel


class SettingRow(SQLModel, table=True):
    """A single named setting (e.g. the recent files list) stored as JSON"""
    __tablename__ = "settings"
    key: str = Field(primary_key=True)
    value: Any = Field(default=None, sa_column=Column(JSON, nullable=True))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
