import folium
import streamlit as st
from folium import plugins
from streamlit_folium import st_folium

from app.config import get_map_config
from app.services.classifier import population_legend, road_legend
from app.services.dataset_loader import load_datasets
from app.services.filter_index import ALL
from app.services.layer_composer import feature_collection, format_population
from app.services.map_session import MapSession

CONFIG = get_map_config()

st.set_page_config(layout="wide", page_title="WebGIS Penduduk & Jalan")
st.title("WebGIS Kepadatan Penduduk dan Jaringan Jalan")


# -------------------------------------------------------------------
# Data loading
# -------------------------------------------------------------------
@st.cache_resource
def load_geojson_datasets():
    return load_datasets(CONFIG)


def apply_update(update):
    """Keep the latest output of each layer; None means unchanged."""
    if update.regions is not None:
        st.session_state["regions"] = update.regions
    if update.roads is not None:
        st.session_state["roads"] = update.roads
    if update.sub_region_options is not None:
        st.session_state["sub_region_options"] = update.sub_region_options


if "map_session" not in st.session_state:
    region_data, road_data = load_geojson_datasets()
    session = MapSession(region_data, road_data)
    st.session_state["map_session"] = session
    st.session_state["regions"] = None
    st.session_state["roads"] = None
    st.session_state["sub_region_options"] = []
    apply_update(session.refresh())

session = st.session_state["map_session"]

if not session.has_regions:
    st.error(f"Gagal memuat {CONFIG.region_file}")
if not session.has_roads:
    st.error(f"Gagal memuat {CONFIG.road_file}")
if not session.has_regions and not session.has_roads:
    st.error("Tidak ada data yang berhasil dimuat!")
    st.stop()


# -------------------------------------------------------------------
# Transitions (one widget event -> one state machine call)
# -------------------------------------------------------------------
def on_region_change():
    apply_update(session.select_region(st.session_state["region_select"]))
    st.session_state["sub_region_select"] = ALL


def on_sub_region_change():
    apply_update(session.select_sub_region(st.session_state["sub_region_select"]))


def on_toggle_heatmap():
    apply_update(session.toggle_heatmap())


def on_reset():
    apply_update(session.reset())
    st.session_state["region_select"] = ALL
    st.session_state["sub_region_select"] = ALL


st.sidebar.selectbox(
    "Kota/Kabupaten",
    [ALL] + session.index.regions_sorted(),
    key="region_select",
    format_func=lambda v: "Semua Wilayah" if v == ALL else v,
    on_change=on_region_change,
)
st.sidebar.selectbox(
    "Kecamatan",
    [ALL] + st.session_state["sub_region_options"],
    key="sub_region_select",
    format_func=lambda v: "Semua Kecamatan" if v == ALL else v,
    on_change=on_sub_region_change,
)

heatmap_on = session.state.heatmap_visible
st.sidebar.button(
    "🔥 Heatmap: ON" if heatmap_on else "🔥 Toggle Heatmap",
    key="btn_heatmap",
    on_click=on_toggle_heatmap,
)
st.sidebar.button("🔄 Reset View", key="btn_reset", on_click=on_reset)

regions = st.session_state["regions"]
roads = st.session_state["roads"]

if regions is not None:
    st.sidebar.write(f"Kecamatan ditampilkan: **{regions.matched_count}**")
    st.sidebar.write(f"Total penduduk: **{format_population(regions.total_population)} jiwa**")
if roads is not None:
    st.sidebar.write(f"Segmen jalan: **{len(roads)}**")


# -------------------------------------------------------------------
# Map
# -------------------------------------------------------------------
def _renderable(fc):
    fc["features"] = [f for f in fc["features"] if f["geometry"]]
    for f in fc["features"]:
        f["properties"].update(f["properties"].pop("popup_fields"))
    return fc


def legend_html():
    grades = population_legend()
    rows = []
    for i, (bound, color) in enumerate(grades):
        upper = f"&ndash;{format_population(grades[i + 1][0])}" if i + 1 < len(grades) else "+"
        rows.append(
            f'<i style="background:{color};width:14px;height:14px;display:inline-block"></i> '
            f'{format_population(bound)}{upper}<br>'
        )
    rows.append("<br><strong>Jalan:</strong><br>")
    labels = {"Arterial": "Arteri", "Collector": "Kolektor", "Local": "Lokal"}
    for name, color in road_legend():
        rows.append(
            f'<i style="background:{color};width:14px;height:14px;display:inline-block"></i> '
            f'{labels.get(name, name)}<br>'
        )
    return (
        '<div style="position: fixed; bottom: 30px; right: 10px; z-index: 9999; '
        'background: white; padding: 8px 10px; border-radius: 4px; font-size: 12px;">'
        '<h4 style="margin:0 0 4px 0">Jumlah Penduduk</h4>' + "".join(rows) + '</div>'
    )


m = folium.Map(location=list(CONFIG.center), zoom_start=CONFIG.default_zoom, tiles=None)
folium.TileLayer("OpenStreetMap", name="OpenStreetMap", max_zoom=19).add_to(m)
folium.TileLayer(
    tiles="https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
    attr="© Esri",
    name="Esri Satellite",
    max_zoom=19,
).add_to(m)
folium.TileLayer(
    tiles="https://{s}.basemaps.cartocdn.com/light_all/{z}/{x}/{y}{r}.png",
    attr="© CARTO",
    name="Carto Light",
    max_zoom=19,
).add_to(m)

if regions is not None and regions.styled_features:
    folium.GeoJson(
        _renderable(feature_collection(regions.styled_features)),
        name="Data Penduduk",
        style_function=lambda f: {
            "fillColor": f["properties"]["color"],
            "weight": f["properties"]["weight"],
            "opacity": 1,
            "color": f["properties"]["outline_color"],
            "dashArray": f["properties"]["dash_array"],
            "fillOpacity": f["properties"]["fill_opacity"],
        },
        highlight_function=lambda f: {"weight": 5, "color": "#666", "dashArray": "", "fillOpacity": 0.9},
        tooltip=folium.GeoJsonTooltip(fields=["tooltip_label"], labels=False),
        popup=folium.GeoJsonPopup(
            fields=["name", "region", "population", "area_km2", "density"],
            aliases=["Kecamatan", "Kabupaten/Kota", "Jumlah Penduduk (jiwa)",
                     "Luas estimasi (km²)", "Kepadatan estimasi (jiwa/km²)"],
            localize=True,
        ),
    ).add_to(m)

if roads:
    folium.GeoJson(
        _renderable(feature_collection(roads)),
        name="Jalan Utama",
        style_function=lambda f: {
            "color": f["properties"]["color"],
            "weight": f["properties"]["weight"],
            "opacity": f["properties"]["opacity"],
        },
        popup=folium.GeoJsonPopup(
            fields=["name", "type", "length_km"],
            aliases=["Jalan", "Tipe", "Panjang estimasi (km)"],
        ),
    ).add_to(m)

if heatmap_on and regions is not None and regions.heat_points:
    heat = CONFIG.heatmap
    plugins.HeatMap(
        [[p.lat, p.lng, p.intensity] for p in regions.heat_points],
        name="Heatmap Penduduk",
        radius=heat.radius,
        blur=heat.blur,
        max_zoom=heat.max_zoom,
        gradient=heat.gradient,
    ).add_to(m)

if regions is not None and regions.bounds is not None:
    min_lng, min_lat, max_lng, max_lat = regions.bounds
    m.fit_bounds([[min_lat, min_lng], [max_lat, max_lng]], padding=(50, 50))

m.get_root().html.add_child(folium.Element(legend_html()))
plugins.MousePosition(position="bottomleft", separator=" | ", prefix="Lat/Lng:", num_digits=5).add_to(m)
folium.LayerControl(position="topleft").add_to(m)

st_folium(m, use_container_width=True, height=650, returned_objects=[])
