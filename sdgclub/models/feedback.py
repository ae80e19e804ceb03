"""
Feedback model
"""

from sqlalchemy import Column, String, Text, Boolean

from sdgclub.core.db import Base
from sdgclub.models._mixins import id_column, created_at_column

class Feedback(Base):
    __tablename__ = "feedback"

    id = id_column()
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True)
    message = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default="feedback")
    is_approved = Column(Boolean, default=False, nullable=False)
    created_at = created_at_column()
