"""Query the gateway once for a transaction's current status.

Useful for following up on a collection that timed out while still pending.
"""

import argparse
import json

from momocollect.common.config import load_settings
from momocollect.common.errors import MomoCollectError
from momocollect.common.gateway import GatewayClient
from momocollect.services.poller.service import StatusPoller


def main() -> None:
    """Parse CLI args and print one status snapshot as JSON."""

    parser = argparse.ArgumentParser(description="Print the current status of one transaction.")
    parser.add_argument("--reference", required=True)
    parser.add_argument("--base-url", default=None, help="Override BASE_URL from the environment")
    args = parser.parse_args()

    overrides = {"base_url": args.base_url} if args.base_url else {}
    try:
        settings = load_settings(**overrides)
        with GatewayClient.from_settings(settings) as gateway:
            snapshot = StatusPoller(gateway, service_name=settings.service_name).fetch_status(args.reference)
    except MomoCollectError as exc:
        raise SystemExit(f"status check failed: {exc}")

    print(json.dumps(snapshot.model_dump(mode="json"), indent=2))


if __name__ == "__main__":
    main()
