"""The edgebin route table.

``create_app`` assembles the service: every route module registers its
handlers on one ``App``, services are injected with ``app.provide`` and
CORS decoration wraps every HTTP response::

    from edgebin.routes import create_app

    app = create_app()                       # bundled assets, real network
    app = create_app(assets=MemoryAssets({...}), fetcher=Fetcher(transport=...))
"""

from edgebin.app import App
from edgebin.assets import AssetStore, DirectoryAssets, bundled_assets
from edgebin.config import AppConfig
from edgebin.errors import NotFound
from edgebin.fetch import Fetcher
from edgebin.http.request import Request
from edgebin.http.response import Response
from edgebin.middleware.cors import CORSConfig, CORSMiddleware
from edgebin.routes import (
    auth,
    convert,
    cookies,
    dynamic,
    formats,
    inspection,
    mix,
    page_meta,
    qrcode,
    redirects,
    webhook,
    ws,
)

ROUTE_MODULES = (
    formats,
    inspection,
    auth,
    cookies,
    redirects,
    dynamic,
    convert,
    qrcode,
    page_meta,
    mix,
    webhook,
    ws,
)


def create_app(
    config: AppConfig | None = None,
    *,
    assets: AssetStore | None = None,
    fetcher: Fetcher | None = None,
) -> App:
    """Build the edgebin application.

    Args:
        config: Application settings. Defaults to ``AppConfig()``.
        assets: Asset store. Defaults to ``config.assets_dir`` when set,
            otherwise the assets bundled with the package.
        fetcher: Outbound HTTP client. Defaults to a network ``Fetcher``
            with ``config.fetch_timeout``.
    """
    config = config or AppConfig()
    if assets is None:
        assets = DirectoryAssets(config.assets_dir) if config.assets_dir else bundled_assets()
    if fetcher is None:
        fetcher = Fetcher(timeout=config.fetch_timeout)

    app = App(config)
    app.provide(AppConfig, lambda: config)
    app.provide(AssetStore, lambda: assets)
    app.provide(Fetcher, lambda: fetcher)
    app.add_middleware(CORSMiddleware(CORSConfig.from_app_config(config)))

    for module in ROUTE_MODULES:
        module.register(app)

    @app.fallback
    def serve_static(request: Request) -> Response:
        """Unmatched paths are looked up in the asset store unless strict."""
        if config.strict_api:
            raise NotFound(f"No route matches {request.path!r}")
        return formats.serve_asset(assets, request.path.lstrip("/"))

    return app


__all__ = ["ROUTE_MODULES", "create_app"]
