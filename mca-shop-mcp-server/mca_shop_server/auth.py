"""Admin gate for the MCA Shop dashboard."""

import logging

from .models import AdminCredentials

logger = logging.getLogger(__name__)

ADMIN_FRAGMENT = "#mcaadmin2024"
STORE_FRAGMENT = "#store"

ADMIN_USERNAME = "mcaghassen"
ADMIN_PASSWORD = "mca2005"


class AdminGate:
    """
    Hidden-fragment admin login.

    The admin login prompt is only revealed by navigating to the hidden
    fragment. A successful login flips an in-memory flag; there is no token
    and nothing is persisted, so the flag is lost with the session.
    """

    def __init__(self) -> None:
        self.is_admin = False
        self.show_login = False
        self.fragment = ""

    def handle_fragment(self, fragment: str) -> None:
        """Record the current URL fragment and reveal the login prompt for the admin one."""
        if fragment and not fragment.startswith("#"):
            fragment = f"#{fragment}"
        self.fragment = fragment
        if fragment == ADMIN_FRAGMENT:
            self.show_login = True

    @staticmethod
    def check_credentials(credentials: AdminCredentials) -> bool:
        return credentials.username == ADMIN_USERNAME and credentials.password == ADMIN_PASSWORD

    def login(self, credentials: AdminCredentials) -> bool:
        """
        Attempt an admin login.

        Returns:
            True if the credentials match, False otherwise
        """
        if not self.check_credentials(credentials):
            logger.warning(f"Rejected admin login for {credentials.username!r}")
            return False

        self.is_admin = True
        self.show_login = False
        self.fragment = ""
        logger.info("Admin logged in")
        return True

    def logout(self) -> None:
        self.is_admin = False
        self.fragment = STORE_FRAGMENT
        logger.info("Admin logged out")

    def dismiss_login(self) -> None:
        """Close the login prompt and go back to the store fragment."""
        self.show_login = False
        self.fragment = STORE_FRAGMENT
