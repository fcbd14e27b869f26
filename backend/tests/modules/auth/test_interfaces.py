from unittest.mock import MagicMock

from modules.auth.interfaces import IAuthService
from modules.auth.service import AuthService

INTERFACE_METHODS = [
    "register",
    "login",
    "refresh",
    "logout",
    "get_current_session",
    "get_user_by_id",
]


class TestAuthInterface:
    def test_interface_methods_exist(self):
        """IAuthService should define required methods."""
        for method in INTERFACE_METHODS:
            assert hasattr(IAuthService, method)

    def test_auth_service_has_interface_methods(self):
        """AuthService should have all IAuthService methods."""
        for method in INTERFACE_METHODS:
            assert hasattr(AuthService, method)
            assert callable(getattr(AuthService, method))

    def test_service_instance_satisfies_protocol(self):
        """IAuthService is runtime checkable."""
        service = AuthService(session_factory=MagicMock())
        assert isinstance(service, IAuthService)
