"""Manual tool for sending live match notifications"""
import argparse
import sys
from typing import Optional

from .config import Config
from .storage.match_store import MatchStore, StoreError, create_store_client
from .storage.models import Match
from .services.push_client import PushClient, PushError, create_firebase_app
from .services.notification_service import NotificationService
from .utils.logger import setup_logger
from .utils.timezone import now_utc

logger = setup_logger(__name__)


def create_test_match(opponent1: str, opponent2: str, live_url: Optional[str] = None) -> Match:
    """
    Create an unsaved match used only to render a test notification

    Args:
        opponent1: First opponent name
        opponent2: Second opponent name
        live_url: Optional stream URL

    Returns:
        Match object
    """
    return Match(
        id="test",
        opponent1_name=opponent1,
        opponent2_name=opponent2,
        match_time=now_utc(),
        live_url=live_url,
        status="test"
    )


def send_for_stored_match(service: NotificationService, match_id: str) -> bool:
    """
    Run the regular dispatch for a stored match

    This flags the match as notified and writes a log entry on success.
    """
    try:
        match = service.store.get_match(match_id)
    except StoreError as e:
        logger.error(f"Could not load match: {e}")
        return False

    logger.info(
        f"Loaded match {match.id}: {match.opponent1_name} VS {match.opponent2_name} "
        f"(starts at {match.match_time})"
    )
    return service.send_live_notification(match)


def send_test_push(service: NotificationService, match: Match, dry_run: bool = False) -> bool:
    """
    Send a one-off push to every registered device without touching the store rows

    Args:
        service: Notification service used to render the message
        match: Unsaved match to render
        dry_run: Only print what would be sent

    Returns:
        True if the push was sent (or rendered in dry-run mode)
    """
    title = service.format_title(match)
    body = service.format_body(match)

    try:
        tokens = service.store.get_device_tokens()
    except StoreError as e:
        logger.error(f"Could not load device tokens: {e}")
        return False

    logger.info(f"Title: {title}")
    logger.info(f"Body: {body}")
    logger.info(f"Data: {service.build_data(match)}")
    logger.info(f"Registered devices: {len(tokens)}")

    if dry_run:
        logger.info("Dry run, nothing sent")
        return True

    if not tokens:
        logger.warning("No device tokens found")
        return False

    try:
        result = service.push_client.send_multicast(
            tokens, title=title, body=body, data=service.build_data(match)
        )
    except PushError as e:
        logger.error(f"✗ Failed to send test notification: {e}")
        return False

    logger.info(f"✓ Sent to {result.success_count}/{result.total} devices")
    return True


def build_service(config: Config) -> NotificationService:
    """Create the store and push clients and wire a notification service"""
    store = MatchStore(create_store_client(config.supabase_url, config.supabase_service_key))
    push_client = PushClient(create_firebase_app(config.firebase_credentials))
    return NotificationService(
        store=store,
        push_client=push_client,
        title_template=config.live_title_template,
        body_template=config.live_body_template,
        live_status=config.live_status_label
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Send live match push notifications by hand"
    )
    parser.add_argument(
        "--match-id",
        type=str,
        help="Dispatch for a stored match (marks it notified and writes a log entry)"
    )
    parser.add_argument(
        "--opponent1",
        type=str,
        default="Test Team A",
        help="First opponent for a test push (default: 'Test Team A')"
    )
    parser.add_argument(
        "--opponent2",
        type=str,
        default="Test Team B",
        help="Second opponent for a test push (default: 'Test Team B')"
    )
    parser.add_argument(
        "--url",
        type=str,
        default=None,
        help="Stream URL to include in a test push"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Render the test push and count devices without sending"
    )
    return parser


def main(argv=None):
    """Main entry point"""
    args = build_parser().parse_args(argv)

    # Load configuration
    try:
        config = Config()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    service = build_service(config)

    if args.match_id:
        success = send_for_stored_match(service, args.match_id)
    else:
        match = create_test_match(args.opponent1, args.opponent2, args.url)
        success = send_test_push(service, match, dry_run=args.dry_run)

    if not success:
        sys.exit(1)


if __name__ == "__main__":
    main()
