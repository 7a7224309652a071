import uuid
from datetime import datetime, timezone
from marketplace import db
from marketplace.business.core.data_insertion_mixin import DataInsertionMixin


def new_id():
    """Opaque identifier for every marketplace entity"""
    return str(uuid.uuid4())


def utcnow():
    """Naive UTC timestamp, matching how DateTime columns are stored"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampedBase(db.Model, DataInsertionMixin):
    """Abstract base class for marketplace entities"""

    __abstract__ = True

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
