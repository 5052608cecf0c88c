from urllib.parse import urlencode

from stripe_cartridge.config import STOREFRONT_URL_PREFIX


def url(action: str, *params) -> str:
    """Build a storefront URL: url("Checkout-Begin", "stage", "payment") -> /Checkout-Begin?stage=payment"""
    if len(params) % 2:
        raise ValueError("URL parameters must be given as name/value pairs")

    path = f"{STOREFRONT_URL_PREFIX}/{action}"
    pairs = list(zip(params[::2], params[1::2]))
    if not pairs:
        return path
    return f"{path}?{urlencode(pairs)}"
