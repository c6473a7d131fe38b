"""Generate a VAPID key pair for Web Push.

Run this once and add the output to your .env.

Usage:
    python scripts/generate_vapid.py
"""

import base64

from cryptography.hazmat.primitives.asymmetric import ec


def b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def generate_vapid_keys() -> dict[str, str]:
    """Return a P-256 key pair as base64url strings, the form browsers and pywebpush expect."""
    private_key = ec.generate_private_key(ec.SECP256R1())
    private_bytes = private_key.private_numbers().private_value.to_bytes(32, "big")

    public_numbers = private_key.public_key().public_numbers()
    # Uncompressed EC point: 0x04 || X || Y
    public_bytes = b"\x04" + public_numbers.x.to_bytes(32, "big") + public_numbers.y.to_bytes(32, "big")

    return {
        "public_key": b64url(public_bytes),
        "private_key": b64url(private_bytes),
    }


def main():
    keys = generate_vapid_keys()
    print("Add these to your .env:\n")
    print(f"VAPID_PUBLIC_KEY={keys['public_key']}")
    print(f"VAPID_PRIVATE_KEY={keys['private_key']}")
    print("VAPID_SUBJECT=mailto:notifications@lifeos.app")


if __name__ == "__main__":
    main()
