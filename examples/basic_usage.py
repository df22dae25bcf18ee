#!/usr/bin/env python3
"""
Basic usage example for the Superset client.

Lists dashboards, exports the first one and imports it back.
"""

import logging
import os
import tempfile
from pathlib import Path

from superset_client import SupersetClient, UnexpectedResponseError


def main():
    """Run the example against a local Superset."""
    logging.basicConfig(level=logging.DEBUG)

    host = os.getenv("SUPERSET_HOST", "localhost")
    port = int(os.getenv("SUPERSET_PORT", "8088"))
    username = os.getenv("SUPERSET_USERNAME", "admin")
    password = os.getenv("SUPERSET_PASSWORD", "admin")

    with SupersetClient(host, port, username, password) as client:
        print("Listing dashboards...")
        dashboards = client.list_dashboards()
        for dashboard in dashboards.get("result", []):
            print(f"  - {dashboard['id']}: {dashboard['dashboard_title']}")

        if not dashboards.get("result"):
            print("No dashboards to export")
            return

        dashboard_id = dashboards["result"][0]["id"]
        archive = Path(tempfile.gettempdir()) / f"dashboard_{dashboard_id}.zip"

        print(f"Exporting dashboard {dashboard_id}...")
        client.export_dashboard(dashboard_id, archive)
        print(f"Wrote {archive.stat().st_size} bytes to {archive}")

        print("Importing it back...")
        try:
            client.import_dashboard(archive, os.getenv("SUPERSET_DB_PASSWORDS"), overwrite=True)
            print("Import successful")
        except UnexpectedResponseError as e:
            print(f"Import failed: {e}")


if __name__ == "__main__":
    main()
