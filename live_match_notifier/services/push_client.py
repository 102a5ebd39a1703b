"""Firebase Cloud Messaging client for push notifications"""
from typing import Any, Dict, List, Optional, Union

import firebase_admin
from firebase_admin import credentials, messaging

from ..storage.models import MulticastResult
from ..utils.logger import setup_logger

logger = setup_logger(__name__)

# FCM rejects multicast messages with more tokens than this
MAX_MULTICAST_TOKENS = 500

DEFAULT_APP_NAME = "[DEFAULT]"


class PushError(Exception):
    """A push gateway call failed"""


def create_firebase_app(
    service_account: Union[str, Dict[str, Any]],
    name: str = DEFAULT_APP_NAME
) -> firebase_admin.App:
    """
    Initialize the process-wide Firebase app

    Args:
        service_account: Path to a service account file or its parsed JSON
        name: Firebase app name

    Returns:
        Initialized Firebase app (reused if already initialized)
    """
    try:
        return firebase_admin.get_app(name)
    except ValueError:
        pass

    cred = credentials.Certificate(service_account)
    return firebase_admin.initialize_app(cred, name=name)


class PushClient:
    """Sends multicast push notifications through FCM"""

    def __init__(self, app: Optional[firebase_admin.App] = None):
        """
        Initialize push client

        Args:
            app: Firebase app; the default app is used when omitted
        """
        self.app = app

    @staticmethod
    def _build_data(data: Optional[Dict[str, Any]]) -> Dict[str, str]:
        """FCM data payload values must all be strings"""
        if not data:
            return {}
        return {str(k): '' if v is None else str(v) for k, v in data.items()}

    def send_multicast(
        self,
        tokens: List[str],
        title: str,
        body: str,
        data: Optional[Dict[str, Any]] = None
    ) -> MulticastResult:
        """
        Send one notification to many device tokens

        Args:
            tokens: Device registration tokens
            title: Notification title
            body: Notification body
            data: Data payload

        Returns:
            Aggregate success and failure counts

        Raises:
            PushError: If any gateway call fails
        """
        if not tokens:
            return MulticastResult(success_count=0, failure_count=0)

        payload_data = self._build_data(data)
        success_count = 0
        failure_count = 0

        for start in range(0, len(tokens), MAX_MULTICAST_TOKENS):
            batch = tokens[start:start + MAX_MULTICAST_TOKENS]
            message = messaging.MulticastMessage(
                tokens=batch,
                notification=messaging.Notification(title=title, body=body),
                data=payload_data
            )

            try:
                response = messaging.send_each_for_multicast(message, app=self.app)
            except Exception as e:
                raise PushError(f"Multicast send failed: {e}") from e

            success_count += response.success_count
            failure_count += response.failure_count

        if failure_count:
            logger.debug(f"{failure_count} device(s) rejected the notification")

        return MulticastResult(success_count=success_count, failure_count=failure_count)
