from backend.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from backend.app.models.user import User  # noqa: F401
from backend.app.models.template import Template  # noqa: F401
from backend.app.models.template_field import TemplateField  # noqa: F401
from backend.app.models.invoice import Invoice  # noqa: F401
