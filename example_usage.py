#!/usr/bin/env python3
"""
Basic usage examples for the 360ksiegowosc API client.

Reads credentials from KSIEGOWOSC_API_ID / KSIEGOWOSC_API_KEY and lists
taxes, banks and customers, then demonstrates error handling and
cancellation.
"""

import logging
import sys
import threading

from ksiegowosc_client import (
    Ksiegowosc360Client,
    CancellationToken,
    APIError,
    ConfigurationError,
    KsiegowoscClientError,
    RequestCancelledError,
    get_datestamp,
    get_timestamp,
    sign
)


def main():
    """Run basic usage examples."""

    print("=== 360ksiegowosc Client Basic Usage Examples ===\n")

    print("1. Creating client from environment...")
    try:
        client = Ksiegowosc360Client.from_env()
    except ConfigurationError as e:
        print(f"   ✗ {e}")
        sys.exit(1)
    print(f"   Client created for: {client.base_url}")
    print(f"   Api id: {client.api_id}\n")

    try:
        print("2. Signing a payload locally...")
        timestamp = get_timestamp()
        signature, params = sign(client.api_id, client.credentials.api_key, timestamp, "{}")
        print(f"   Timestamp: {timestamp} (date {get_datestamp()})")
        print(f"   Signature: {signature[:8]}...")
        print(f"   Query parameters: {sorted(params)}\n")

        print("3. Listing taxes...")
        for tax in client.get_taxes():
            state = "inactive" if tax['NonActive'] else "active"
            print(f"   {tax['Code']:>6}  {tax['Name']} ({state})")
        print()

        print("4. Listing banks...")
        for bank in client.get_banks():
            print(f"   {bank['Name']}  {bank['IBANCode']} {bank['CurrencyCode']}")
        print()

        print("5. Listing customers...")
        customers = client.get_customers()
        print(f"   ✓ {len(customers)} customers\n")

        print("6. Demonstrating error handling with a wrong key...")
        with Ksiegowosc360Client(client.api_id, "wrong-key", base_url=client.base_url) as wrong_client:
            try:
                wrong_client.get_taxes()
                print("    ✗ Wrong key was accepted")
            except APIError as e:
                print(f"    ✓ Rejected: {e.message} (code={e.code}, status={e.status})")
        print()

        print("7. Demonstrating cancellation...")
        token = CancellationToken()
        threading.Timer(0.01, token.cancel, args=("demo cancel",)).start()
        try:
            client.get_invoices({"UnPaid": True}, cancel_token=token)
            print("    Request finished before cancellation")
        except RequestCancelledError as e:
            print(f"    ✓ Cancelled: {e}")
        print()

        print("=== All Examples Completed Successfully! ===")

    except KsiegowoscClientError as e:
        print(f"Client Error: {e}")
        sys.exit(1)
    finally:
        client.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
