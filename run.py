"""
Command-line entry point for the Shipping API client.

Runs the same CLI as the installed ``shippingapi`` command, e.g.:

    python run.py --mock-dir tests/fixtures/mock_responses --counters rate shipment.yaml
"""

from shippingapi.cli import main

if __name__ == "__main__":
    main()
