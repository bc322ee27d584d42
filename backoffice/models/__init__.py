# Backoffice — Database Models
# Import all models here for SQLAlchemy discovery

from backoffice.models.user import User         # noqa
from backoffice.models.car import Car           # noqa
from backoffice.models.student import Student   # noqa
