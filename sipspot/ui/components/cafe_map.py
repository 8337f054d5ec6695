"""Leaflet map of cafes with optional marker clustering."""
import html
import json
import logging

from nicegui import app, ui

from config import DEFAULT_LOCATION, MAP_DEFAULT_ZOOM, MARKERCLUSTER_CSS, MARKERCLUSTER_JS
from sipspot.services.asset_loader import AssetLoadError, MapAssetLoader
from sipspot.services.geo import bounds, cluster_tiers, project_markers

logger = logging.getLogger(__name__)

_MARKER_EVENT = "cafe_marker_click"

# Resolves to {ok, error} instead of rejecting so failures reach Python as data.
_INJECT_JS = """
return await new Promise((resolve) => {
    const url = %(url)s;
    const kind = %(kind)s;
    const attr = kind === 'script' ? 'src' : 'href';
    if (document.querySelector(`[${attr}="${url}"]`)) { resolve({ok: true}); return; }
    const el = document.createElement(kind === 'script' ? 'script' : 'link');
    if (kind === 'script') { el.src = url; el.async = true; }
    else { el.rel = 'stylesheet'; el.href = url; }
    el.onload = () => resolve({ok: true});
    el.onerror = () => resolve({ok: false, error: 'Failed to load ' + url});
    document.head.appendChild(el);
});
"""

_MARKERS_JS = """
const map = getElement(%(map_id)s).map;
if (map._sipspotLayer) { map.removeLayer(map._sipspotLayer); }
const tiers = %(tiers)s;
const useCluster = %(cluster)s && typeof L.markerClusterGroup === 'function';
const layer = useCluster ? L.markerClusterGroup({
    iconCreateFunction: (cluster) => {
        const count = cluster.getChildCount();
        const tier = tiers.find(t => t.limit === null || count < t.limit);
        return L.divIcon({
            html: `<div style="background:${tier.color};width:${tier.size}px;height:${tier.size}px;` +
                  `border-radius:50%%;display:flex;align-items:center;justify-content:center;` +
                  `color:white;font-weight:bold;border:3px solid white">${count}</div>`,
            className: 'sipspot-cluster',
            iconSize: L.point(tier.size, tier.size),
        });
    },
}) : L.layerGroup();
for (const m of %(markers)s) {
    const marker = L.marker([m.lat, m.lng], {title: m.title});
    marker.bindPopup(m.popup);
    marker.on('click', () => emitEvent('%(event)s', {id: m.id}));
    layer.addLayer(marker);
}
map.addLayer(layer);
map._sipspotLayer = layer;
"""


def _asset_loader() -> MapAssetLoader:
    loader = app.storage.client.get("map_assets")
    if loader is None:
        async def _inject(url: str, kind: str) -> None:
            result = await ui.run_javascript(
                _INJECT_JS % {"url": json.dumps(url), "kind": json.dumps(kind)}, timeout=15,
            )
            if not result or not result.get("ok"):
                raise AssetLoadError((result or {}).get("error") or f"Could not load {url}")

        loader = MapAssetLoader(_inject)
        app.storage.client["map_assets"] = loader
    return loader


def _popup_html(marker) -> str:
    parts = [f"<b>{html.escape(marker.title)}</b>"]
    parts.append(f"{marker.rating:.1f} ★ · {html.escape(marker.price_label)}")
    if marker.address:
        parts.append(html.escape(marker.address))
    parts.append(f'<a href="/cafes/{html.escape(marker.cafe_id)}">View details</a>')
    return "<br>".join(parts)


def cafe_map(cafes, height: str = "420px", cluster: bool = True, on_marker_click=None):
    """Render a map with one marker per located cafe.

    Several markers fit the viewport to their bounds; a single marker is
    centred at the default zoom. ``on_marker_click`` receives the cafe id.
    """
    markers = project_markers(cafes)
    box = bounds(markers)
    start = markers[0].latlng if len(markers) == 1 else (DEFAULT_LOCATION["lat"], DEFAULT_LOCATION["lng"])

    leaflet = ui.leaflet(center=start, zoom=MAP_DEFAULT_ZOOM).classes("w-full rounded-lg").style(
        f"height: {height}"
    )

    if on_marker_click is not None:
        # one page-level listener per client; the latest map's callback wins
        if "marker_click" not in app.storage.client:
            ui.on(_MARKER_EVENT, lambda e: app.storage.client["marker_click"](e.args.get("id")))
        app.storage.client["marker_click"] = on_marker_click

    async def _populate():
        await leaflet.initialized()
        use_cluster = cluster
        if cluster and markers:
            result = await _asset_loader().load_all(
                [(MARKERCLUSTER_CSS, "stylesheet"), (MARKERCLUSTER_JS, "script")]
            )
            if not result.ready:
                logger.warning("Marker clustering unavailable: %s", result.error)
                use_cluster = False

        payload = [
            {"id": m.cafe_id, "lat": m.lat, "lng": m.lng, "title": m.title, "popup": _popup_html(m)}
            for m in markers
        ]
        ui.run_javascript(_MARKERS_JS % {
            "map_id": leaflet.id,
            "tiers": json.dumps(cluster_tiers()),
            "cluster": "true" if use_cluster else "false",
            "markers": json.dumps(payload),
            "event": _MARKER_EVENT,
        })
        if len(markers) > 1:
            (south, west), (north, east) = box
            leaflet.run_map_method("fitBounds", [[south, west], [north, east]], {"padding": [40, 40]})

    ui.timer(0.1, _populate, once=True)
    return leaflet
