"""FastAPI dependencies."""

from fastapi import Request

from assetbroker.services.container import AssetServices


def get_services(request: Request) -> AssetServices:
    """Return the asset services attached to the app at startup.

    Routes never build stores themselves; tests override this dependency.
    """
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Asset services not initialized on app.state (startup/lifespan not executed).")
    return services
