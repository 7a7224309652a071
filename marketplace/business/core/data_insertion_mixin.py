"""
Generic data insertion mixin for SQLAlchemy models
Provides from_dict and to_dict methods used by seeding, the database build and the test fixtures
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import inspect
from marketplace import db
from marketplace.logger import get_logger

logger = get_logger("marketplace.domain.core.data_insertion")


class DataInsertionMixin:
    """
    Mixin that provides generic data insertion capabilities for SQLAlchemy models

    This mixin adds:
    - from_dict(): Create model instance from dictionary
    - to_dict(): Convert model instance to dictionary
    - create_from_dict(): Create and save model instance from dictionary
    - find_or_create_from_dict(): Look up by unique fields before creating
    """

    @classmethod
    def from_dict(cls, data_dict, skip_fields=None):
        """
        Create a model instance from a dictionary

        Args:
            data_dict (dict): Dictionary containing model data
            skip_fields (list, optional): Fields to skip during creation

        Returns:
            Model instance (not saved to database)
        """
        if skip_fields is None:
            skip_fields = []

        mapper = inspect(cls)
        columns = {c.key: c for c in mapper.columns}

        filtered_data = {}
        for key, value in data_dict.items():
            if key in columns and key not in skip_fields:
                if key in ['created_at', 'updated_at'] and value is None:
                    continue
                filtered_data[key] = value

        instance = cls(**filtered_data)

        # Plain-text passwords are never stored; hash them through set_password
        if 'password' in data_dict and hasattr(instance, 'set_password'):
            instance.set_password(data_dict['password'])

        return instance

    def to_dict(self, include_timestamps=True):
        """
        Convert model instance to dictionary

        Decimals are rendered as strings so money values survive JSON
        without float rounding.
        """
        result = {}
        mapper = inspect(self.__class__)

        for column in mapper.columns:
            if column.key == 'password_hash':
                continue
            if not include_timestamps and column.key in ['created_at', 'updated_at']:
                continue

            value = getattr(self, column.key)
            if isinstance(value, datetime):
                result[column.key] = value.isoformat()
            elif isinstance(value, Decimal):
                result[column.key] = str(value)
            else:
                result[column.key] = value

        return result

    @classmethod
    def create_from_dict(cls, data_dict, skip_fields=None, commit=True):
        """
        Create and save a model instance from dictionary

        Returns:
            Model instance (saved to database)
        """
        instance = cls.from_dict(data_dict, skip_fields)

        try:
            db.session.add(instance)
            if commit:
                db.session.commit()
                logger.info(f"Created {cls.__name__}: {instance}")
            return instance
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating {cls.__name__}: {e}")
            raise

    @classmethod
    def find_or_create_from_dict(cls, data_dict, lookup_fields=None, skip_fields=None, commit=True):
        """
        Find existing instance or create new one from dictionary

        Args:
            data_dict (dict): Dictionary containing model data
            lookup_fields (list, optional): Fields to use for lookup (default: unique fields)
            skip_fields (list, optional): Fields to skip during creation
            commit (bool): Whether to commit the transaction

        Returns:
            tuple: (instance, created) where created is boolean
        """
        if lookup_fields is None:
            mapper = inspect(cls)
            lookup_fields = [c.key for c in mapper.columns if c.unique and c.key in data_dict]

        lookup_data = {field: data_dict[field] for field in lookup_fields if field in data_dict}
        if not lookup_data:
            return cls.create_from_dict(data_dict, skip_fields, commit), True

        existing = cls.query.filter_by(**lookup_data).first()
        if existing:
            logger.info(f"Found existing {cls.__name__}: {existing}")
            return existing, False

        return cls.create_from_dict(data_dict, skip_fields, commit), True
