# Visitor pass portal: local database models
# Import all models here for SQLAlchemy discovery

from app.models.action_log import ActionLog   # noqa
