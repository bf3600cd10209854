"""SSLContext factory functions for the syslog TLS transport."""

import ssl


def create_client_context_verified(ca_file: str = "") -> ssl.SSLContext:
    """Verify the collector's cert against *ca_file*, or the system roots when empty."""
    ctx = ssl.create_default_context(cafile=ca_file or None)
    ctx.minimum_version = ssl.TLSVersion.TLSv1_2
    return ctx


def create_client_context_unverified() -> ssl.SSLContext:
    """Create an SSL context that skips certificate verification (dev use)."""
    ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    ctx.minimum_version = ssl.TLSVersion.TLSv1_2
    return ctx


def create_client_context(ca_file: str = "", insecure_skip_verify: bool = False) -> ssl.SSLContext:
    if insecure_skip_verify:
        return create_client_context_unverified()
    return create_client_context_verified(ca_file)
