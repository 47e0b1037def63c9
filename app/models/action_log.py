# app/models/action_log.py
"""
Audit trail of workflow actions forwarded to the upstream pass-request API.
One row per attempt; failed attempts are kept with outcome="failed".
Written by action_service.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from app.database import Base


class ActionLog(Base):
    __tablename__ = "action_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    action = Column(String(50), nullable=False, index=True)   # approve | reject | route | generate_pass ...
    request_id = Column(String(100), index=True)
    visitor_id = Column(String(100), index=True)
    acting_user_id = Column(String(100))
    comment = Column(Text)
    outcome = Column(String(20), nullable=False)               # ok | failed
    detail = Column(Text)
    created_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<ActionLog {self.id} {self.action} visitor={self.visitor_id} outcome={self.outcome}>"
