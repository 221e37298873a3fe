"""
Constants for the 360ksiegowosc API client.
Compatible with the Merit Aktiva "connecting robots" API.
"""

# Query parameters carried by every signed request
PARAM_API_ID = "ApiId"
PARAM_TIMESTAMP = "timestamp"
PARAM_SIGNATURE = "signature"

DEFAULT_BASE_URL = "https://program.360ksiegowosc.pl/api"

# Endpoint paths (relative to base_url)
PATH_GET_INVOICES = "v1/getinvoices"
PATH_SEND_INVOICE = "v1/sendinvoice"
PATH_GET_CUSTOMERS = "v1/getcustomers"
PATH_SEND_CUSTOMER = "v2/sendcustomer"
PATH_GET_TAXES = "v1/gettaxes"
PATH_GET_BANKS = "v1/getbanks"

# Error codes
ERROR_UNKNOWN = "unknown_error"
ERROR_UNKNOWN_RESPONSE = "unknown_response"

# Default configuration values
DEFAULT_CONFIG = {
    'base_url': DEFAULT_BASE_URL,
    'timeout': None,            # no transport timeout, cancellation is caller-driven
}

# Environment variables read by Ksiegowosc360Client.from_env()
ENV_API_ID = "KSIEGOWOSC_API_ID"
ENV_API_KEY = "KSIEGOWOSC_API_KEY"
ENV_BASE_URL = "KSIEGOWOSC_BASE_URL"

# Other constants
MAX_ERROR_TEXT = 4096  # characters of raw body kept in parse errors
MAX_LOG_TEXT = 2000
