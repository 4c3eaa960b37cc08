"""
RoleGate - Azure-style role-based access control.

RoleGate decides whether an identity may perform a permission on a
resource scope, based on the role assignments the identity holds and the
role definitions those assignments reference.
"""

from rolegate.constants import APP_NAME, APP_VERSION

__version__ = APP_VERSION
__app_name__ = APP_NAME

__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "__version__",
    "__app_name__",
]
