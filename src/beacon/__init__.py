"""Beacon — client-side instrumentation and verification for a web page.

Four cooperating parts, each started independently when the page is ready:

    Status Monitor        periodic health polling with a three-state display
    Redirect Verifier     one-shot redirect probe with domain matching
    Analytics Collector   session-scoped event buffering
    Performance Observer  navigation and resource timing capture

Quick start::

    import beacon

    async with beacon.Beacon(beacon.BeaconConfig(base_url="https://example.com")) as page:
        await page.check_status()
        page.track("signup", {"plan": "free"})

"""

__version__ = "0.1.0"
__all__ = [
    "Beacon",
    "BeaconConfig",
    "__version__",
    "load_config",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import beacon`` fast; httpx is only imported when the runtime is.
    """
    if name == "Beacon":
        from beacon.app import Beacon

        return Beacon

    if name == "BeaconConfig":
        from beacon.config import BeaconConfig

        return BeaconConfig

    if name == "load_config":
        from beacon.config_loader import load_config

        return load_config

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
