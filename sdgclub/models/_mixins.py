"""
Shared column helpers
"""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String


def new_id() -> str:
    return str(uuid.uuid4())


def id_column():
    return Column(String(36), primary_key=True, default=new_id)


def created_at_column():
    return Column(DateTime, default=datetime.utcnow, nullable=False)


def updated_at_column():
    return Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
