"""Domain modules package."""

from edufeedback.modules.feedback import models as feedback_models  # noqa: F401
from edufeedback.modules.identity import models as identity_models  # noqa: F401
from edufeedback.modules.teachers import models as teachers_models  # noqa: F401
